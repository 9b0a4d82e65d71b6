from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PaymentTarget(str, Enum):
    BOATYARD = "Boatyard"
    SUPPLIER = "Supplier"


class PaymentSessionStatus(str, Enum):
    UNINITIATED = "uninitiated"
    CREATING = "creating"
    READY = "ready"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ABANDONED = "abandoned"


TERMINAL_STATUSES = frozenset(
    {PaymentSessionStatus.SUCCEEDED, PaymentSessionStatus.FAILED, PaymentSessionStatus.ABANDONED}
)


@dataclass(frozen=True)
class PaymentInstructions:
    qr_code: str | None = None
    bin: str | None = None
    account_number: str | None = None
    amount: int | None = None
    description: str | None = None
    checkout_url: str | None = None

    @property
    def is_empty(self) -> bool:
        return not any(
            (self.qr_code, self.bin, self.account_number, self.amount, self.description, self.checkout_url)
        )

    @property
    def has_checkout_page(self) -> bool:
        return bool(self.checkout_url)


@dataclass(frozen=True)
class PaymentSession:
    id: str  # client-side attempt id
    target_id: str  # booking id or order id
    target_type: PaymentTarget
    address: str
    status: PaymentSessionStatus = PaymentSessionStatus.UNINITIATED
    instructions: PaymentInstructions | None = None
    confirmation: str | None = None  # "checkout" | "declared" once succeeded
    failure_reason: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES
