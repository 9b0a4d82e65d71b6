"""
Tests for booking submission: validation, the single-flight submit guard,
and how backend failures surface to the confirmation screen.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from maritimehub.application.exceptions import (
    AuthenticationError,
    BookingError,
    GatewayError,
    NetworkError,
    SubmissionInProgressError,
    ValidationError,
)
from maritimehub.application.ports.bookings import BookingsPort
from maritimehub.application.use_cases.booking_orchestrator import BookingOrchestrator, SubmitState
from maritimehub.application.utils import messages
from maritimehub.domain.entities.booking import Booking
from maritimehub.domain.entities.booking_draft import BookingDraft
from maritimehub.domain.entities.catalog import DockSlot, ServiceItem, Ship

START = datetime(2030, 5, 1, 8, 0, tzinfo=timezone.utc)


class RecordingBookings(BookingsPort):
    def __init__(self, on_create: Callable[[], Booking] | None = None) -> None:
        self.calls: list[dict] = []
        self._on_create = on_create

    def create_booking(self, ship_id, dock_slot_id, start_time, end_time, service_ids, booking_type=0):
        self.calls.append(
            {
                "ship_id": ship_id,
                "dock_slot_id": dock_slot_id,
                "start_time": start_time,
                "end_time": end_time,
                "service_ids": service_ids,
                "booking_type": booking_type,
            }
        )
        if self._on_create is not None:
            return self._on_create()
        return Booking(id=f"BK{len(self.calls)}", status="Pending", total_amount=1500000)

    def get_booking(self, booking_id):
        raise NotImplementedError

    def list_bookings(self):
        return []


def _draft(**overrides) -> BookingDraft:
    fields = dict(
        boatyard_id="BY1",
        services=(ServiceItem(id="SVC1", name="Hull cleaning", price=1500000),),
        slot=DockSlot(id="S1", name="Berth A1"),
        ship=Ship(id="SH1", name="Sea Breeze"),
        start_time=START,
        end_time=START + timedelta(hours=2),
    )
    fields.update(overrides)
    return BookingDraft(**fields)


def test_end_before_start_is_rejected_without_a_call():
    """Scenario: end <= start never reaches the backend."""
    bookings = RecordingBookings()
    orchestrator = BookingOrchestrator(bookings)

    with pytest.raises(ValidationError) as exc:
        orchestrator.submit(_draft(end_time=START - timedelta(hours=1)))

    assert exc.value.message == messages.END_BEFORE_START
    assert bookings.calls == []
    assert orchestrator.state == SubmitState.IDLE


def test_equal_start_and_end_is_rejected():
    bookings = RecordingBookings()
    with pytest.raises(ValidationError):
        BookingOrchestrator(bookings).submit(_draft(end_time=START))
    assert bookings.calls == []


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"ship": None}, messages.SHIP_REQUIRED),
        ({"slot": None}, messages.SLOT_REQUIRED),
        ({"services": ()}, messages.SERVICE_REQUIRED),
    ],
)
def test_missing_selection_is_rejected(overrides, message):
    bookings = RecordingBookings()
    with pytest.raises(ValidationError) as exc:
        BookingOrchestrator(bookings).submit(_draft(**overrides))
    assert exc.value.message == message
    assert bookings.calls == []


def test_window_outside_slot_availability_is_rejected():
    slot = DockSlot(id="S1", assigned_from=START, assigned_until=START + timedelta(hours=1))
    bookings = RecordingBookings()
    with pytest.raises(ValidationError) as exc:
        BookingOrchestrator(bookings).submit(_draft(slot=slot))
    assert exc.value.message == messages.OUTSIDE_SLOT_WINDOW
    assert bookings.calls == []


def test_submit_sends_draft_fields_and_marks_submitted():
    bookings = RecordingBookings()
    orchestrator = BookingOrchestrator(bookings, booking_type=0)

    booking = orchestrator.submit(_draft())

    assert booking.id == "BK1"
    assert orchestrator.state == SubmitState.SUBMITTED
    assert orchestrator.booking == booking
    call = bookings.calls[0]
    assert call["ship_id"] == "SH1"
    assert call["dock_slot_id"] == "S1"
    assert call["service_ids"] == ["SVC1"]
    assert call["booking_type"] == 0


def test_second_submit_while_in_flight_makes_no_call():
    """A confirm tapped again before the first response is rejected, not sent twice."""
    seen: list[Exception] = []
    orchestrator: BookingOrchestrator

    def create_while_resubmitting() -> Booking:
        assert orchestrator.state == SubmitState.SUBMITTING
        try:
            orchestrator.submit(_draft())
        except SubmissionInProgressError as e:
            seen.append(e)
        return Booking(id="BK1", status="Pending")

    bookings = RecordingBookings(on_create=create_while_resubmitting)
    orchestrator = BookingOrchestrator(bookings)

    booking = orchestrator.submit(_draft())

    assert booking.id == "BK1"
    assert len(bookings.calls) == 1
    assert len(seen) == 1
    assert seen[0].message == messages.BOOKING_IN_PROGRESS


def test_submit_after_success_returns_existing_booking():
    bookings = RecordingBookings()
    orchestrator = BookingOrchestrator(bookings)

    first = orchestrator.submit(_draft())
    second = orchestrator.submit(_draft())

    assert second == first
    assert len(bookings.calls) == 1


def test_server_message_is_passed_through_and_submit_reenabled():
    """Scenario: a 400 with a server message shows that message and allows retry."""

    def reject() -> Booking:
        raise GatewayError(status_code=400, message="Dock slot not found", server_message="Dock slot not found")

    bookings = RecordingBookings(on_create=reject)
    orchestrator = BookingOrchestrator(bookings)
    draft = _draft()

    with pytest.raises(BookingError) as exc:
        orchestrator.submit(draft)

    assert exc.value.message == "Dock slot not found"
    assert orchestrator.state == SubmitState.IDLE
    assert orchestrator.booking is None
    assert draft.ship.id == "SH1"


def test_rejection_without_server_message_uses_generic_text():
    def reject() -> Booking:
        raise GatewayError(status_code=500, message="API error 500")

    orchestrator = BookingOrchestrator(RecordingBookings(on_create=reject))
    with pytest.raises(BookingError) as exc:
        orchestrator.submit(_draft())
    assert exc.value.message == messages.BOOKING_FAILED


def test_network_error_becomes_booking_error_and_can_retry():
    attempts = {"n": 0}

    def flaky() -> Booking:
        attempts["n"] += 1
        if attempts["n"] == 1:
            raise NetworkError("Request timed out.")
        return Booking(id="BK9", status="Pending")

    bookings = RecordingBookings(on_create=flaky)
    orchestrator = BookingOrchestrator(bookings)

    with pytest.raises(BookingError) as exc:
        orchestrator.submit(_draft())
    assert exc.value.message == messages.BOOKING_FAILED
    assert orchestrator.state == SubmitState.IDLE

    assert orchestrator.submit(_draft()).id == "BK9"
    assert len(bookings.calls) == 2


def test_expired_login_is_not_reported_as_booking_failure():
    """A 401 keeps its type so the caller can send the user back to login."""

    def unauthorized() -> Booking:
        raise AuthenticationError(status_code=401, message="Unauthorized")

    orchestrator = BookingOrchestrator(RecordingBookings(on_create=unauthorized))

    with pytest.raises(AuthenticationError) as exc:
        orchestrator.submit(_draft())

    assert exc.value.retryable is False
    assert orchestrator.state == SubmitState.IDLE
    assert orchestrator.booking is None
