from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace

from maritimehub.application.exceptions import (
    AuthenticationError,
    GatewayError,
    InvalidTransitionError,
    NetworkError,
    PaymentCreationError,
    ValidationError,
)
from maritimehub.application.ports.payments import PaymentsPort
from maritimehub.application.utils import messages
from maritimehub.domain.entities.payment_session import PaymentSession, PaymentSessionStatus, PaymentTarget

_ALLOWED: dict[PaymentSessionStatus, frozenset[PaymentSessionStatus]] = {
    PaymentSessionStatus.UNINITIATED: frozenset({PaymentSessionStatus.CREATING}),
    PaymentSessionStatus.CREATING: frozenset({PaymentSessionStatus.READY}),
    PaymentSessionStatus.READY: frozenset(
        {PaymentSessionStatus.SUCCEEDED, PaymentSessionStatus.FAILED, PaymentSessionStatus.ABANDONED}
    ),
    PaymentSessionStatus.SUCCEEDED: frozenset(),
    PaymentSessionStatus.FAILED: frozenset(),
    PaymentSessionStatus.ABANDONED: frozenset(),
}


def transition(session: PaymentSession, to: PaymentSessionStatus, **changes: object) -> PaymentSession:
    """Return a copy of ``session`` in state ``to``; terminal sessions never change."""
    if to not in _ALLOWED[session.status]:
        raise InvalidTransitionError(f"Payment session cannot move from {session.status.value} to {to.value}.")
    return replace(session, status=to, **changes)


class PaymentSessionService:
    """Creates payment sessions against the backend and tracks the live one per target."""

    def __init__(self, payments: PaymentsPort, default_address: str, limit: int = 500) -> None:
        self._payments = payments
        self._default_address = default_address
        self._live: dict[tuple[PaymentTarget, str], PaymentSession] = {}
        self._limit = limit
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def live_session(self, target_id: str, target_type: PaymentTarget = PaymentTarget.BOATYARD) -> PaymentSession | None:
        with self._lock:
            return self._live.get((PaymentTarget(target_type), target_id))

    def forget(self, target_id: str | None, target_type: PaymentTarget = PaymentTarget.BOATYARD) -> None:
        """Drop the tracked session once its flow is completed or discarded."""
        if target_id is None:
            return
        with self._lock:
            self._live.pop((PaymentTarget(target_type), target_id), None)

    def create(
        self,
        target_id: str,
        target_type: PaymentTarget = PaymentTarget.BOATYARD,
        address: str | None = None,
    ) -> PaymentSession:
        """Uninitiated -> Creating -> Ready. A new session supersedes any earlier one for the same target."""
        target_type = PaymentTarget(target_type)
        resolved_address = (address or "").strip()
        if not resolved_address:
            if target_type == PaymentTarget.SUPPLIER:
                raise ValidationError(messages.ADDRESS_REQUIRED)
            resolved_address = self._default_address

        session = PaymentSession(
            id=uuid.uuid4().hex,
            target_id=target_id,
            target_type=target_type,
            address=resolved_address,
        )
        session = transition(session, PaymentSessionStatus.CREATING)

        try:
            instructions = self._payments.create_payment(target_id, target_type, resolved_address)
        except AuthenticationError:
            raise
        except (GatewayError, NetworkError) as e:
            self._logger.warning("Payment creation failed", extra={"booking_id": target_id, "error": e.message})
            raise PaymentCreationError(messages.PAYMENT_CREATION_FAILED) from e

        if instructions.is_empty:
            self._logger.warning("Payment created without instructions", extra={"booking_id": target_id})
            raise PaymentCreationError(messages.PAYMENT_DATA_MISSING)

        session = transition(session, PaymentSessionStatus.READY, instructions=instructions)
        key = (target_type, target_id)
        with self._lock:
            previous = self._live.pop(key, None)
            self._live[key] = session
            if len(self._live) > self._limit:
                oldest = next(iter(self._live))
                self._live.pop(oldest)
                self._logger.info("Evicted oldest payment session", extra={"booking_id": oldest[1]})
        if previous is not None:
            self._logger.info("Superseding payment session", extra={"booking_id": target_id, "status": previous.status.value})
        self._logger.info("Payment session ready", extra={"booking_id": target_id})
        return session

    def record(self, session: PaymentSession) -> None:
        """Store a session that moved state, unless a newer attempt has superseded it."""
        key = (session.target_type, session.target_id)
        with self._lock:
            current = self._live.get(key)
            if current is not None and current.id == session.id:
                self._live[key] = session
