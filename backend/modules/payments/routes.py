"""
Payment API endpoints.

Customers submit and track their own payments; employees review every
payment and approve or reject pending ones.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_payment_service
from api.middleware.auth import RequireCustomer, RequireEmployee
from shared.models import AuthenticatedUser

from .interfaces import IPaymentService
from .models import CreatePaymentRequest, Payment, PaymentResponse, VerifyPaymentRequest

router = APIRouter()


@router.post("/create", response_model=PaymentResponse, status_code=201)
async def create_payment(
    body: CreatePaymentRequest,
    user: AuthenticatedUser = RequireCustomer,
    service: IPaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    """Submit a payment; it stays Pending until an employee verifies it."""
    payment = service.create_payment(user, body)
    return PaymentResponse(message="Payment logged for approval", payment=payment)


@router.get("/my-payments", response_model=list[Payment])
async def my_payments(
    user: AuthenticatedUser = RequireCustomer,
    service: IPaymentService = Depends(get_payment_service),
) -> list[Payment]:
    """List the caller's payments, newest first."""
    return service.list_for_owner(user.id)


@router.get("/pending", response_model=list[Payment])
async def pending_payments(
    user: AuthenticatedUser = RequireEmployee,
    service: IPaymentService = Depends(get_payment_service),
) -> list[Payment]:
    """List payments awaiting verification, oldest first."""
    return service.list_pending()


@router.get("/all", response_model=list[Payment])
async def all_payments(
    user: AuthenticatedUser = RequireEmployee,
    service: IPaymentService = Depends(get_payment_service),
) -> list[Payment]:
    """List every payment, newest first."""
    return service.list_all()


@router.post("/verify/{payment_id}", response_model=PaymentResponse)
async def verify_payment(
    payment_id: str,
    body: VerifyPaymentRequest,
    user: AuthenticatedUser = RequireEmployee,
    service: IPaymentService = Depends(get_payment_service),
) -> PaymentResponse:
    """
    Approve or reject a pending payment.

    A payment can only be verified once; later attempts return 409.
    """
    payment = service.verify_payment(payment_id, body.status, user)
    return PaymentResponse(
        message=f"Payment {payment.status.value.lower()} successfully",
        payment=payment,
    )
