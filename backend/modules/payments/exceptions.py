"""
Payments module exceptions.

These exceptions are raised by the payments module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import ConflictError, NotFoundError, ValidationError


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment ID doesn't exist."""

    def __init__(self, payment_id: str):
        super().__init__(
            "Payment not found",
            code="PAYMENT_NOT_FOUND",
            details={"payment_id": payment_id},
        )


class PaymentAlreadyProcessedError(ConflictError):
    """Raised when verifying a payment that is no longer pending."""

    def __init__(self, payment_id: str, status: str):
        super().__init__(
            f"Payment has already been {status.lower()}",
            code="PAYMENT_ALREADY_PROCESSED",
            details={"payment_id": payment_id, "status": status},
        )


class InvalidPaymentStatusError(ValidationError):
    """Raised when a verification names a status other than Approved / Rejected."""

    def __init__(self, status: object):
        super().__init__(
            "Status must be Approved or Rejected",
            code="INVALID_PAYMENT_STATUS",
            details={"status": str(status)},
        )
