"""
Payments module.

Customers submit internal or international (SWIFT) payments; employees
approve or reject them.

Public API:
- IPaymentService interface
- PaymentService in-memory implementation
- Payment models and exceptions
"""

from .interfaces import IPaymentService
from .models import (
    PaymentType,
    InternalPayment,
    InternationalPayment,
    PaymentStatus,
    CreatePaymentRequest,
    VerifyPaymentRequest,
    Payment,
    PaymentResponse,
)
from .exceptions import (
    PaymentNotFoundError,
    PaymentAlreadyProcessedError,
    InvalidPaymentStatusError,
)
from .service import PaymentService
from .validation import build_payment

__all__ = [
    # Interface
    "IPaymentService",
    # Models
    "PaymentType",
    "PaymentStatus",
    "CreatePaymentRequest",
    "VerifyPaymentRequest",
    "InternalPayment",
    "InternationalPayment",
    "Payment",
    "PaymentResponse",
    # Exceptions
    "PaymentNotFoundError",
    "PaymentAlreadyProcessedError",
    "InvalidPaymentStatusError",
    # Service
    "PaymentService",
    "build_payment",
]
