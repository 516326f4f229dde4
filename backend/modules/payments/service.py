"""
Payment service implementation.

Payments are kept in memory for the lifetime of the process. All state
changes happen under one lock, so a payment is verified at most once even
when two employees act on it at the same time.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from shared.models import AuthenticatedUser

from .exceptions import (
    InvalidPaymentStatusError,
    PaymentAlreadyProcessedError,
    PaymentNotFoundError,
)
from .models import CreatePaymentRequest, Payment, PaymentStatus
from .validation import build_payment

logger = logging.getLogger(__name__)

VERIFIED_STATUSES = (PaymentStatus.APPROVED, PaymentStatus.REJECTED)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PaymentService:
    """In-memory implementation of IPaymentService."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._payments: dict[str, Payment] = {}
        self._lock = threading.Lock()
        self._now = clock or _utc_now

    def __len__(self) -> int:
        with self._lock:
            return len(self._payments)

    def create_payment(self, owner: AuthenticatedUser, request: CreatePaymentRequest) -> Payment:
        payment = build_payment(
            request,
            owner,
            payment_id=str(uuid.uuid4()),
            created_at=self._now(),
        )
        with self._lock:
            self._payments[payment.id] = payment

        logger.info(
            f"Payment {payment.id} ({payment.payment_type.value}) submitted by user {owner.id}"
        )
        return payment

    def _snapshot(self) -> list[Payment]:
        with self._lock:
            return list(self._payments.values())

    def list_for_owner(self, owner_id: str) -> list[Payment]:
        owned = [p for p in self._snapshot() if p.owner_id == owner_id]
        return sorted(owned, key=lambda p: p.created_at, reverse=True)

    def list_pending(self) -> list[Payment]:
        pending = [p for p in self._snapshot() if p.status is PaymentStatus.PENDING]
        return sorted(pending, key=lambda p: p.created_at)

    def list_all(self) -> list[Payment]:
        return sorted(self._snapshot(), key=lambda p: p.created_at, reverse=True)

    def verify_payment(
        self,
        payment_id: str,
        status: object,
        verifier: AuthenticatedUser,
    ) -> Payment:
        try:
            decision = PaymentStatus(status)
        except ValueError:
            raise InvalidPaymentStatusError(status)
        if decision not in VERIFIED_STATUSES:
            raise InvalidPaymentStatusError(status)

        with self._lock:
            payment = self._payments.get(payment_id)
            if payment is None:
                raise PaymentNotFoundError(payment_id)
            if payment.status is not PaymentStatus.PENDING:
                raise PaymentAlreadyProcessedError(payment_id, payment.status.value)

            updated = payment.model_copy(
                update={
                    "status": decision,
                    "verified_by": verifier.id,
                    "verified_at": self._now(),
                }
            )
            self._payments[payment_id] = updated

        logger.info(f"Payment {payment_id} {decision.value.lower()} by user {verifier.id}")
        return updated
