from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable

from maritimehub.application.exceptions import (
    FlowNotFoundError,
    InvalidTransitionError,
    PaymentCreationError,
    ReconciliationAmbiguous,
    SubmissionInProgressError,
    ValidationError,
)
from maritimehub.application.ports.catalog import CatalogPort
from maritimehub.application.ports.checkout_surface import CheckoutSurfacePort
from maritimehub.application.use_cases.booking_orchestrator import BookingOrchestrator, SubmitState
from maritimehub.application.use_cases.payment_reconciler import PaymentReconciler
from maritimehub.application.use_cases.payment_sessions import PaymentSessionService
from maritimehub.application.utils import messages
from maritimehub.domain.entities.booking import Booking
from maritimehub.domain.entities.booking_draft import BookingDraft
from maritimehub.domain.entities.catalog import DockSlot, ServiceItem, Ship
from maritimehub.domain.entities.payment_outcome import OutcomeResult, PaymentOutcome
from maritimehub.domain.entities.payment_session import PaymentSession, PaymentTarget

PAYMENT_MODE_IMMEDIATE = "immediate"
PAYMENT_MODE_DEFERRED = "deferred"


class FlowStage(str, Enum):
    SELECTING = "selecting"
    BOOKED = "booked"
    PAYING = "paying"
    COMPLETED = "completed"
    DISCARDED = "discarded"


@dataclass(frozen=True)
class ConfirmResult:
    next_step: str  # "select_ship" | "booked" | "payment"
    draft: BookingDraft
    booking: Booking | None = None
    payment: PaymentSession | None = None
    payment_error: str | None = None


class BookingFlow:
    """
    One booking/payment flow: the draft, its own submit guard, and the current
    payment attempt. Flows share nothing, so two flows started from two
    boatyards cannot see each other's fields.
    """

    def __init__(
        self,
        flow_id: str,
        draft: BookingDraft | None,
        catalog: CatalogPort,
        orchestrator: BookingOrchestrator,
        payments: PaymentSessionService,
        surface_factory: Callable[[], CheckoutSurfacePort],
        payment_mode: str = PAYMENT_MODE_DEFERRED,
        default_hours: int = 2,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.id = flow_id
        self._draft = draft
        self._catalog = catalog
        self._orchestrator = orchestrator
        self._payments = payments
        self._surface_factory = surface_factory
        self._payment_mode = payment_mode
        self._default_hours = default_hours
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._stage = FlowStage.SELECTING
        self._booking: Booking | None = None
        self._target_id: str | None = None
        self._target_type = PaymentTarget.BOATYARD
        self._amount: int | None = None
        self._address: str | None = None
        self._surface: CheckoutSurfacePort | None = None
        self._reconciler: PaymentReconciler | None = None
        self._logger = logging.getLogger(__name__)

    # -- state -------------------------------------------------------------

    @property
    def stage(self) -> FlowStage:
        return self._stage

    @property
    def draft(self) -> BookingDraft | None:
        return self._draft

    @property
    def booking(self) -> Booking | None:
        return self._booking

    @property
    def target_id(self) -> str | None:
        return self._target_id

    @property
    def target_type(self) -> PaymentTarget:
        return self._target_type

    @property
    def amount(self) -> int | None:
        return self._amount

    @property
    def submitting(self) -> bool:
        return self._orchestrator.state == SubmitState.SUBMITTING

    @property
    def payment(self) -> PaymentSession | None:
        return self._reconciler.session if self._reconciler is not None else None

    @property
    def surface(self) -> CheckoutSurfacePort | None:
        return self._surface

    @property
    def outcome(self) -> PaymentOutcome | None:
        return self._reconciler.outcome if self._reconciler is not None else None

    # -- selection steps ---------------------------------------------------

    def select_services(self, services: ServiceItem | Iterable[ServiceItem]) -> BookingDraft:
        draft = self._editable_draft()
        try:
            self._draft = draft.with_services(services)
        except ValueError as e:
            raise ValidationError(messages.SERVICE_REQUIRED) from e
        return self._draft

    def select_services_by_id(self, service_ids: list[str]) -> BookingDraft:
        draft = self._editable_draft()
        available = {s.id: s for s in self._catalog.list_boatyard_services(draft.boatyard_id)}
        unknown = [sid for sid in service_ids if sid not in available]
        if unknown or not service_ids:
            raise ValidationError(messages.SERVICE_REQUIRED)
        return self.select_services([available[sid] for sid in service_ids])

    def select_slot(self, slot: DockSlot) -> BookingDraft:
        self._draft = self._editable_draft().with_slot(slot)
        return self._draft

    def select_slot_by_id(self, slot_id: str) -> BookingDraft:
        draft = self._editable_draft()
        slot = next((s for s in self._catalog.list_dock_slots(draft.boatyard_id) if s.id == slot_id), None)
        if slot is None:
            raise ValidationError(messages.SLOT_REQUIRED)
        return self.select_slot(slot)

    def select_ship(self, ship: Ship) -> BookingDraft:
        self._draft = self._editable_draft().with_ship(ship)
        return self._draft

    def select_ship_by_id(self, ship_id: str) -> BookingDraft:
        self._editable_draft()
        ship = next((s for s in self._catalog.list_ships() if s.id == ship_id), None)
        if ship is None:
            raise ValidationError(messages.SHIP_REQUIRED)
        return self.select_ship(ship)

    def set_times(self, start_time: datetime, end_time: datetime) -> BookingDraft:
        self._draft = self._editable_draft().with_times(start_time, end_time)
        return self._draft

    def enter_confirmation(self) -> BookingDraft:
        """The confirmation step starts with now .. now + default hours unless times were chosen."""
        self._draft = self._editable_draft().with_default_times(self._clock(), self._default_hours)
        return self._draft

    # -- submit ------------------------------------------------------------

    def confirm(self) -> ConfirmResult:
        draft = self.enter_confirmation()
        if draft.ship is None:
            return ConfirmResult(next_step="select_ship", draft=draft)

        booking = self._orchestrator.submit(draft)
        if self._stage == FlowStage.DISCARDED:
            self._logger.info("Dropping booking result for closed flow", extra={"flow_id": self.id, "booking_id": booking.id})
            raise FlowNotFoundError("This booking flow was closed.")

        self._booking = booking
        self._draft = draft
        self._target_id = booking.id
        self._amount = booking.total_amount if booking.total_amount is not None else draft.total_price
        self._stage = FlowStage.BOOKED
        self._logger.info("Flow booked", extra={"flow_id": self.id, "booking_id": booking.id})

        if self._payment_mode == PAYMENT_MODE_IMMEDIATE:
            try:
                session = self.start_payment()
            except PaymentCreationError as e:
                # The booking exists; payment can be started again from the booked step.
                return ConfirmResult(next_step="booked", draft=draft, booking=booking, payment_error=e.message)
            return ConfirmResult(next_step="payment", draft=draft, booking=booking, payment=session)
        return ConfirmResult(next_step="booked", draft=draft, booking=booking)

    # -- payment -----------------------------------------------------------

    def attach_target(self, target_id: str, target_type: PaymentTarget, amount: int | None = None) -> None:
        """Start a flow at the payment step for an existing booking or order."""
        if self._stage != FlowStage.SELECTING or self._target_id is not None:
            raise InvalidTransitionError("This flow already has a payment target.")
        self._target_id = target_id
        self._target_type = PaymentTarget(target_type)
        self._amount = amount
        self._stage = FlowStage.BOOKED

    def start_payment(self, address: str | None = None) -> PaymentSession:
        self._require_open()
        if self._target_id is None:
            raise InvalidTransitionError("Create the booking before paying.")
        outcome = self.outcome
        if outcome is not None and outcome.result != OutcomeResult.FAILURE:
            raise InvalidTransitionError("This payment is already settled.")

        if address is not None:
            self._address = address
        session = self._payments.create(self._target_id, self._target_type, self._address)
        if self._stage == FlowStage.DISCARDED:
            self._logger.info("Dropping payment session for closed flow", extra={"flow_id": self.id})
            raise FlowNotFoundError("This booking flow was closed.")

        if self._surface is not None:
            self._surface.close()
        self._surface = self._surface_factory()
        amount = self._amount
        if amount is None and session.instructions is not None:
            amount = session.instructions.amount
        self._reconciler = PaymentReconciler(
            session,
            self._surface,
            amount=amount,
            on_session_change=self._payments.record,
        )
        self._stage = FlowStage.PAYING
        return session

    def retry_payment(self) -> PaymentSession:
        """Retry action of the failure screen: a fresh session for the same target."""
        return self.start_payment()

    def open_checkout(self) -> str:
        return self._active_reconciler().open_checkout()

    def report_navigation(self, url: str | None) -> PaymentOutcome | None:
        outcome = self._active_reconciler().observe(url)
        if outcome is not None:
            self._complete()
        return outcome

    def declare_manual_payment(self) -> PaymentOutcome:
        outcome = self._active_reconciler().declare_manual_payment()
        self._complete()
        return outcome

    def close_payment(self) -> PaymentOutcome | None:
        reconciler = self._active_reconciler()
        try:
            return reconciler.close()
        except ReconciliationAmbiguous:
            # Booking stays Pending; a later start_payment creates a fresh session.
            self._stage = FlowStage.BOOKED
            raise

    def discard(self) -> None:
        if self._surface is not None:
            self._surface.close()
        if self._target_id is not None:
            self._payments.forget(self._target_id, self._target_type)
        self._stage = FlowStage.DISCARDED
        self._draft = None
        self._logger.info("Flow discarded", extra={"flow_id": self.id})

    # -- helpers -----------------------------------------------------------

    def _complete(self) -> None:
        self._stage = FlowStage.COMPLETED
        self._draft = None
        self._payments.forget(self._target_id, self._target_type)

    def _editable_draft(self) -> BookingDraft:
        self._require_open()
        if self._orchestrator.state == SubmitState.SUBMITTING:
            raise SubmissionInProgressError(messages.BOOKING_IN_PROGRESS)
        if self._stage != FlowStage.SELECTING or self._draft is None:
            raise InvalidTransitionError("The booking can no longer be edited.")
        return self._draft

    def _active_reconciler(self) -> PaymentReconciler:
        self._require_open()
        if self._reconciler is None:
            raise InvalidTransitionError("No payment has been started for this flow.")
        return self._reconciler

    def _require_open(self) -> None:
        if self._stage == FlowStage.DISCARDED:
            raise FlowNotFoundError("This booking flow was closed.")


class BookingFlowFactory:
    def __init__(
        self,
        catalog: CatalogPort,
        bookings_factory: Callable[[], BookingOrchestrator],
        payments: PaymentSessionService,
        surface_factory: Callable[[], CheckoutSurfacePort],
        payment_mode: str = PAYMENT_MODE_DEFERRED,
        default_hours: int = 2,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._catalog = catalog
        self._bookings_factory = bookings_factory
        self._payments = payments
        self._surface_factory = surface_factory
        self._payment_mode = payment_mode
        self._default_hours = default_hours
        self._clock = clock

    def start(self, boatyard_id: str, boatyard_name: str | None = None) -> BookingFlow:
        return self._build(BookingDraft(boatyard_id=boatyard_id, boatyard_name=boatyard_name))

    def resume_payment(
        self,
        target_id: str,
        target_type: PaymentTarget = PaymentTarget.BOATYARD,
        amount: int | None = None,
    ) -> BookingFlow:
        flow = self._build(None)
        flow.attach_target(target_id, target_type, amount)
        return flow

    def _build(self, draft: BookingDraft | None) -> BookingFlow:
        return BookingFlow(
            flow_id=uuid.uuid4().hex,
            draft=draft,
            catalog=self._catalog,
            orchestrator=self._bookings_factory(),
            payments=self._payments,
            surface_factory=self._surface_factory,
            payment_mode=self._payment_mode,
            default_hours=self._default_hours,
            clock=self._clock,
        )
