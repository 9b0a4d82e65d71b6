from __future__ import annotations

import logging
from typing import Callable

from maritimehub.application.exceptions import InvalidTransitionError, ReconciliationAmbiguous
from maritimehub.application.ports.checkout_surface import CheckoutSurfacePort
from maritimehub.application.use_cases.payment_sessions import transition
from maritimehub.application.utils import messages
from maritimehub.application.utils.checkout_markers import CheckoutSignal, classify_checkout_url
from maritimehub.domain.entities.payment_outcome import OutcomeResult, PaymentOutcome
from maritimehub.domain.entities.payment_session import PaymentSession, PaymentSessionStatus


class PaymentReconciler:
    """
    Watches one Ready payment session and turns what the user does on the
    payment screen into at most one PaymentOutcome.

    Three exits: the hosted checkout page reaches a terminal URL, the user
    declares a manual bank transfer done, or the user closes the page.
    """

    def __init__(
        self,
        session: PaymentSession,
        surface: CheckoutSurfacePort,
        amount: int | None = None,
        classify: Callable[[str | None], CheckoutSignal | None] = classify_checkout_url,
        on_session_change: Callable[[PaymentSession], None] | None = None,
    ) -> None:
        if session.status != PaymentSessionStatus.READY:
            raise InvalidTransitionError("Only a ready payment session can be reconciled.")
        self._session = session
        self._surface = surface
        self._amount = amount if amount is not None else (session.instructions.amount if session.instructions else None)
        self._classify = classify
        self._on_session_change = on_session_change
        self._outcome: PaymentOutcome | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def session(self) -> PaymentSession:
        return self._session

    @property
    def outcome(self) -> PaymentOutcome | None:
        return self._outcome

    @property
    def is_settled(self) -> bool:
        return self._session.is_terminal

    def open_checkout(self) -> str:
        instructions = self._session.instructions
        if self.is_settled or instructions is None or not instructions.has_checkout_page:
            raise InvalidTransitionError("No checkout page is available for this payment.")
        self._surface.open(instructions.checkout_url)
        return instructions.checkout_url

    def observe(self, url: str | None) -> PaymentOutcome | None:
        """Handle one navigation event. Returns the outcome only on the event that produced it."""
        if self.is_settled:
            return None

        signal = self._classify(url)
        if signal is None:
            return None

        if signal == CheckoutSignal.PAID:
            self._settle(
                transition(self._session, PaymentSessionStatus.SUCCEEDED, confirmation="checkout"),
                OutcomeResult.SUCCESS,
                messages.PAYMENT_SUCCEEDED,
            )
        else:
            message = messages.PAYMENT_CANCELLED if signal == CheckoutSignal.CANCELLED else messages.PAYMENT_FAILED
            self._settle(
                transition(self._session, PaymentSessionStatus.FAILED, failure_reason=signal.value),
                OutcomeResult.FAILURE,
                message,
            )
        self._surface.close()
        return self._outcome

    def declare_manual_payment(self) -> PaymentOutcome:
        """
        The user says the bank transfer is done. Nothing is verified here; the
        outcome is PendingVerification, distinct from a confirmed success.
        """
        if self.is_settled:
            if self._outcome is not None:
                return self._outcome
            raise InvalidTransitionError("This payment session is already closed.")
        self._settle(
            transition(self._session, PaymentSessionStatus.SUCCEEDED, confirmation="declared"),
            OutcomeResult.PENDING_VERIFICATION,
            messages.PAYMENT_PENDING_VERIFICATION,
        )
        self._surface.close()
        return self._outcome

    def close(self) -> PaymentOutcome | None:
        """User closed the payment UI. Raises ReconciliationAmbiguous if nothing terminal was seen."""
        if self.is_settled:
            self._surface.close()
            return self._outcome
        self._session = transition(self._session, PaymentSessionStatus.ABANDONED)
        self._notify()
        self._surface.close()
        self._logger.info("Payment page closed without outcome", extra={"booking_id": self._session.target_id})
        raise ReconciliationAmbiguous(messages.PAYMENT_UNCONFIRMED)

    def _settle(self, session: PaymentSession, result: OutcomeResult, message: str) -> None:
        self._session = session
        self._outcome = PaymentOutcome(
            result=result,
            booking_id=session.target_id,
            message=message,
            amount=self._amount,
            target_type=session.target_type,
        )
        self._notify()
        self._logger.info(
            "Payment outcome",
            extra={"booking_id": session.target_id, "outcome": result.value, "status": session.status.value},
        )

    def _notify(self) -> None:
        if self._on_session_change is not None:
            self._on_session_change(self._session)
