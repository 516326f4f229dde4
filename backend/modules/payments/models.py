"""
Payments module data models.

A customer submits a payment, which starts out Pending; an employee then
approves or rejects it exactly once. A payment is either internal or
international, told apart by ``payment_type``; only international payments
carry beneficiary, bank and SWIFT fields. Bodies use camelCase on the wire.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from modules.auth.models import CamelModel


class PaymentType(str, Enum):
    """Where the money goes."""

    INTERNAL = "internal"            # To another account in the bank
    INTERNATIONAL = "international"  # Via SWIFT to another bank


class PaymentStatus(str, Enum):
    """Payment verification status."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class CreatePaymentRequest(CamelModel):
    """
    Payment submission.

    Fields are optional here so that missing values surface as whitelist
    errors with a readable message rather than a schema error. ``amount``
    may arrive as a string (form input) or a number.
    """

    payment_type: Optional[str] = None
    beneficiary_account: Optional[str] = None
    amount: Optional[Union[str, int, float]] = None
    description: Optional[str] = None
    # International only
    beneficiary: Optional[str] = None
    beneficiary_bank: Optional[str] = None
    swift_code: Optional[str] = None


class VerifyPaymentRequest(CamelModel):
    """Employee decision on a pending payment."""

    status: Optional[str] = None


class PaymentBase(CamelModel):
    """Fields shared by every payment variant."""

    id: str = Field(..., description="Payment ID")
    owner_id: str = Field(..., description="ID of the submitting customer")
    owner_username: str
    owner_account_number: str
    beneficiary_account: str
    amount: Decimal = Field(..., gt=0, description="Amount with at most 2 decimals")
    description: str
    status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime
    verified_by: Optional[str] = Field(None, description="ID of the verifying employee")
    verified_at: Optional[datetime] = None


class InternalPayment(PaymentBase):
    """A transfer to another account in the same bank."""

    payment_type: Literal[PaymentType.INTERNAL] = PaymentType.INTERNAL


class InternationalPayment(PaymentBase):
    """A SWIFT transfer; beneficiary, bank and SWIFT code are required."""

    payment_type: Literal[PaymentType.INTERNATIONAL] = PaymentType.INTERNATIONAL
    beneficiary: str
    beneficiary_bank: str
    swift_code: str


Payment = Annotated[
    Union[InternalPayment, InternationalPayment],
    Field(discriminator="payment_type"),
]


class PaymentResponse(CamelModel):
    """A payment plus a human-readable outcome."""

    message: str
    payment: Payment
