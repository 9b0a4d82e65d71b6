from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from maritimehub.domain.entities.payment_outcome import OutcomeResult, PaymentOutcome
from maritimehub.domain.entities.payment_session import PaymentInstructions

ACTION_RETRY = "retry"
ACTION_HOME = "home"


@dataclass(frozen=True)
class OutcomeScreen:
    kind: str  # "success" | "failure" | "pending_verification"
    payload: dict[str, Any]
    actions: tuple[str, ...] = field(default_factory=tuple)


def present_outcome(outcome: PaymentOutcome) -> OutcomeScreen:
    """Build the terminal screen; the outcome is its only input."""
    if outcome.result == OutcomeResult.SUCCESS:
        return OutcomeScreen(
            kind="success",
            payload={
                "bookingId": outcome.booking_id,
                "message": outcome.message,
                "totalAmount": outcome.amount,
            },
            actions=(ACTION_HOME,),
        )
    if outcome.result == OutcomeResult.PENDING_VERIFICATION:
        return OutcomeScreen(
            kind="pending_verification",
            payload={"bookingId": outcome.booking_id, "message": outcome.message},
            actions=(ACTION_HOME,),
        )
    return OutcomeScreen(
        kind="failure",
        payload={"bookingId": outcome.booking_id, "message": outcome.message},
        actions=(ACTION_RETRY, ACTION_HOME),
    )


def transfer_fields(instructions: PaymentInstructions) -> list[tuple[str, str]]:
    """Copyable (label, value) pairs for the manual bank-transfer view; empty fields are left out."""
    fields: list[tuple[str, str]] = []
    if instructions.bin:
        fields.append(("bin", instructions.bin))
    if instructions.account_number:
        fields.append(("accountNumber", instructions.account_number))
    if instructions.amount is not None:
        fields.append(("amount", str(instructions.amount)))
    if instructions.description:
        fields.append(("description", instructions.description))
    if instructions.qr_code:
        fields.append(("qrCode", instructions.qr_code))
    return fields
