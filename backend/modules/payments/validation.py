"""
Payment construction from untrusted input.

``build_payment`` is the only way a submission becomes a Payment: every
field is checked against an allow-list first, and the variant decides which
fields are required.
"""

import re
from datetime import datetime
from decimal import Decimal
from typing import Optional

from shared.exceptions import ValidationError
from shared.models import AuthenticatedUser

from .models import (
    CreatePaymentRequest,
    InternalPayment,
    InternationalPayment,
    Payment,
    PaymentType,
)

PATTERNS: dict[str, re.Pattern] = {
    "beneficiary": re.compile(r"^[A-Za-z \-]{2,60}$"),
    "beneficiary_bank": re.compile(r"^[A-Za-z \-]{2,100}$"),
    "beneficiary_account": re.compile(r"^[0-9]{8,20}$"),
    "amount": re.compile(r"^[0-9]+(\.[0-9]{1,2})?$"),
    "swift_code": re.compile(r"^[A-Z]{6}[A-Z0-9]{2}([A-Z0-9]{3})?$"),
    "description": re.compile(r"^[A-Za-z0-9 .,\-]{2,200}$"),
}

MESSAGES: dict[str, str] = {
    "payment_type": "Payment type must be internal or international",
    "beneficiary": "Beneficiary name must be 2-60 characters (letters, spaces, hyphens only)",
    "beneficiary_bank": "Bank name must be 2-100 characters (letters, spaces, hyphens only)",
    "beneficiary_account": "Account number must be 8-20 digits",
    "amount": "Amount must be a positive number with up to 2 decimal places",
    "swift_code": "SWIFT code must be 8 or 11 characters (e.g., ABCDEF2A or ABCDEF2AXXX)",
    "description": (
        "Description must be 2-200 characters "
        "(letters, numbers, spaces, hyphens, periods, commas only)"
    ),
}


def _check(field: str, value: Optional[str]) -> str:
    if value is None or PATTERNS[field].fullmatch(value) is None:
        raise ValidationError(MESSAGES[field], details={"field": field})
    return value


def _amount(value) -> Decimal:
    amount = Decimal(_check("amount", None if value is None else str(value)))
    if amount <= 0:
        raise ValidationError(MESSAGES["amount"], details={"field": "amount"})
    return amount


def _payment_type(value: Optional[str]) -> PaymentType:
    if value is None:
        return PaymentType.INTERNAL
    try:
        return PaymentType(value)
    except ValueError:
        raise ValidationError(MESSAGES["payment_type"], details={"field": "payment_type"})


def build_payment(
    request: CreatePaymentRequest,
    owner: AuthenticatedUser,
    payment_id: str,
    created_at: datetime,
) -> Payment:
    """
    Validate a submission and build the matching payment variant.

    A missing ``paymentType`` means internal. International SWIFT codes are
    upper-cased before checking.

    Args:
        request: The raw submission
        owner: The submitting customer
        payment_id: ID to assign
        created_at: Submission time

    Returns:
        InternalPayment or InternationalPayment, status Pending

    Raises:
        ValidationError: On the first field that fails its whitelist
    """
    payment_type = _payment_type(request.payment_type)
    common = dict(
        id=payment_id,
        owner_id=owner.id,
        owner_username=owner.username,
        owner_account_number=owner.account_number,
        beneficiary_account=_check("beneficiary_account", request.beneficiary_account),
        amount=_amount(request.amount),
        description=_check("description", request.description),
        created_at=created_at,
    )

    if payment_type is PaymentType.INTERNAL:
        return InternalPayment(**common)

    swift_code = request.swift_code.upper() if request.swift_code else None
    return InternationalPayment(
        **common,
        beneficiary=_check("beneficiary", request.beneficiary),
        beneficiary_bank=_check("beneficiary_bank", request.beneficiary_bank),
        swift_code=_check("swift_code", swift_code),
    )
