"""
Tests for reconciling a ready payment session into a single outcome.
"""

from __future__ import annotations

import pytest

from maritimehub.application.exceptions import InvalidTransitionError, ReconciliationAmbiguous
from maritimehub.application.ports.checkout_surface import CheckoutSurfacePort
from maritimehub.application.use_cases.payment_reconciler import PaymentReconciler
from maritimehub.application.use_cases.payment_sessions import transition
from maritimehub.application.utils import messages
from maritimehub.domain.entities.payment_outcome import OutcomeResult
from maritimehub.domain.entities.payment_session import (
    PaymentInstructions,
    PaymentSession,
    PaymentSessionStatus,
    PaymentTarget,
)

CHECKOUT_URL = "https://pay.payos.vn/web/abc123"
PAID_URL = "https://app.local/payment/result?code=00&cancel=false&status=PAID&orderCode=1"
CANCEL_URL = "https://app.local/payment/result?code=00&cancel=true&status=CANCELLED&orderCode=1"


class FakeSurface(CheckoutSurfacePort):
    def __init__(self) -> None:
        self.opened: list[str] = []
        self.close_calls = 0
        self._open = False

    def open(self, checkout_url: str) -> None:
        self.opened.append(checkout_url)
        self._open = True

    def close(self) -> None:
        self.close_calls += 1
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open


def _ready_session() -> PaymentSession:
    session = PaymentSession(id="P1", target_id="BK1", target_type=PaymentTarget.BOATYARD, address="Trực tuyến")
    session = transition(session, PaymentSessionStatus.CREATING)
    return transition(
        session,
        PaymentSessionStatus.READY,
        instructions=PaymentInstructions(
            qr_code="000201",
            bin="970422",
            account_number="0123456789",
            amount=1500000,
            description="TT BK1",
            checkout_url=CHECKOUT_URL,
        ),
    )


def test_paid_url_settles_success_and_closes_surface():
    """Scenario: the checkout page reaches a PAID return URL."""
    surface = FakeSurface()
    changes: list[PaymentSession] = []
    reconciler = PaymentReconciler(_ready_session(), surface, on_session_change=changes.append)

    assert reconciler.open_checkout() == CHECKOUT_URL
    assert reconciler.observe(CHECKOUT_URL + "/bank-select") is None

    outcome = reconciler.observe(PAID_URL)

    assert outcome.result == OutcomeResult.SUCCESS
    assert outcome.booking_id == "BK1"
    assert outcome.message == messages.PAYMENT_SUCCEEDED
    assert outcome.amount == 1500000
    assert reconciler.session.status == PaymentSessionStatus.SUCCEEDED
    assert reconciler.session.confirmation == "checkout"
    assert surface.is_open is False
    assert changes[-1].status == PaymentSessionStatus.SUCCEEDED


def test_cancel_url_settles_failure_with_cancel_message():
    surface = FakeSurface()
    reconciler = PaymentReconciler(_ready_session(), surface)
    reconciler.open_checkout()

    outcome = reconciler.observe(CANCEL_URL)

    assert outcome.result == OutcomeResult.FAILURE
    assert outcome.message == messages.PAYMENT_CANCELLED
    assert reconciler.session.status == PaymentSessionStatus.FAILED
    assert reconciler.session.failure_reason == "cancelled"
    assert surface.is_open is False


def test_failed_url_uses_generic_failure_message():
    reconciler = PaymentReconciler(_ready_session(), FakeSurface())
    outcome = reconciler.observe("https://app.local/return?status=FAILED")
    assert outcome.result == OutcomeResult.FAILURE
    assert outcome.message == messages.PAYMENT_FAILED


def test_only_first_terminal_url_counts():
    """A success URL followed by a cancel URL still yields exactly one success."""
    changes: list[PaymentSession] = []
    reconciler = PaymentReconciler(_ready_session(), FakeSurface(), on_session_change=changes.append)

    first = reconciler.observe(PAID_URL)
    second = reconciler.observe(CANCEL_URL)

    assert first.result == OutcomeResult.SUCCESS
    assert second is None
    assert reconciler.outcome == first
    assert len(changes) == 1


def test_declared_transfer_is_pending_verification():
    """Scenario: user taps 'I have paid' on the bank-transfer view."""
    surface = FakeSurface()
    reconciler = PaymentReconciler(_ready_session(), surface)

    outcome = reconciler.declare_manual_payment()

    assert outcome.result == OutcomeResult.PENDING_VERIFICATION
    assert outcome.message == messages.PAYMENT_PENDING_VERIFICATION
    assert reconciler.session.status == PaymentSessionStatus.SUCCEEDED
    assert reconciler.session.confirmation == "declared"
    assert reconciler.declare_manual_payment() == outcome


def test_declare_after_checkout_outcome_keeps_first_outcome():
    reconciler = PaymentReconciler(_ready_session(), FakeSurface())
    paid = reconciler.observe(PAID_URL)
    assert reconciler.declare_manual_payment() == paid


def test_closing_without_terminal_url_is_ambiguous():
    """Scenario: user closes the checkout page; the booking stays pending."""
    surface = FakeSurface()
    changes: list[PaymentSession] = []
    reconciler = PaymentReconciler(_ready_session(), surface, on_session_change=changes.append)
    reconciler.open_checkout()

    with pytest.raises(ReconciliationAmbiguous) as exc:
        reconciler.close()

    assert exc.value.message == messages.PAYMENT_UNCONFIRMED
    assert reconciler.outcome is None
    assert reconciler.session.status == PaymentSessionStatus.ABANDONED
    assert surface.is_open is False
    assert changes[-1].status == PaymentSessionStatus.ABANDONED

    assert reconciler.observe(PAID_URL) is None


def test_close_after_outcome_returns_it():
    reconciler = PaymentReconciler(_ready_session(), FakeSurface())
    paid = reconciler.observe(PAID_URL)
    assert reconciler.close() == paid


def test_reconciler_requires_ready_session():
    session = PaymentSession(id="P1", target_id="BK1", target_type=PaymentTarget.BOATYARD, address="x")
    with pytest.raises(InvalidTransitionError):
        PaymentReconciler(session, FakeSurface())


def test_open_checkout_without_url_is_rejected():
    session = PaymentSession(
        id="P1",
        target_id="BK1",
        target_type=PaymentTarget.BOATYARD,
        address="x",
        status=PaymentSessionStatus.READY,
        instructions=PaymentInstructions(bin="970422", account_number="1"),
    )
    with pytest.raises(InvalidTransitionError):
        PaymentReconciler(session, FakeSurface()).open_checkout()
