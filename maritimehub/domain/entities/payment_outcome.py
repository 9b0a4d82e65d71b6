from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from maritimehub.domain.entities.payment_session import PaymentTarget


class OutcomeResult(str, Enum):
    SUCCESS = "Success"
    FAILURE = "Failure"
    PENDING_VERIFICATION = "PendingVerification"


@dataclass(frozen=True)
class PaymentOutcome:
    result: OutcomeResult
    booking_id: str | None
    message: str
    amount: int | None = None
    target_type: PaymentTarget = PaymentTarget.BOATYARD
