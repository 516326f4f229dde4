"""
Payments module interface.

Routes depend on IPaymentService, not the concrete implementation.
"""

from typing import Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import CreatePaymentRequest, Payment


@runtime_checkable
class IPaymentService(Protocol):
    """
    Interface for submitting and verifying payments.

    Callers are expected to have enforced the role already: customers
    submit and list their own payments, employees list and verify all.
    """

    def create_payment(self, owner: AuthenticatedUser, request: CreatePaymentRequest) -> Payment:
        """
        Submit a payment for approval.

        Args:
            owner: The authenticated customer
            request: Raw payment fields

        Returns:
            The stored payment, status Pending

        Raises:
            ValidationError: If any field fails its whitelist
        """
        ...

    def list_for_owner(self, owner_id: str) -> list[Payment]:
        """List a customer's payments, newest first."""
        ...

    def list_pending(self) -> list[Payment]:
        """List payments awaiting verification, oldest first."""
        ...

    def list_all(self) -> list[Payment]:
        """List every payment, newest first."""
        ...

    def verify_payment(
        self,
        payment_id: str,
        status: object,
        verifier: AuthenticatedUser,
    ) -> Payment:
        """
        Approve or reject a pending payment.

        Args:
            payment_id: Payment to verify
            status: "Approved" or "Rejected"
            verifier: The authenticated employee

        Returns:
            The updated payment

        Raises:
            InvalidPaymentStatusError: If status is not Approved / Rejected
            PaymentNotFoundError: If the payment doesn't exist
            PaymentAlreadyProcessedError: If it was already verified
        """
        ...
