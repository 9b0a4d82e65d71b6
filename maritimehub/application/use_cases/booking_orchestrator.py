from __future__ import annotations

import logging
import threading
from enum import Enum

from maritimehub.application.exceptions import (
    AuthenticationError,
    BookingError,
    GatewayError,
    NetworkError,
    SubmissionInProgressError,
    ValidationError,
)
from maritimehub.application.ports.bookings import BookingsPort
from maritimehub.application.utils import messages
from maritimehub.domain.entities.booking import Booking
from maritimehub.domain.entities.booking_draft import BookingDraft


class SubmitState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


def validate_draft(draft: BookingDraft) -> None:
    """Checks run right before submission. Raises ValidationError; never touches the network."""
    if draft.ship is None:
        raise ValidationError(messages.SHIP_REQUIRED)
    if draft.slot is None:
        raise ValidationError(messages.SLOT_REQUIRED)
    if not draft.services:
        raise ValidationError(messages.SERVICE_REQUIRED)
    if draft.start_time is None or draft.end_time is None or draft.end_time <= draft.start_time:
        raise ValidationError(messages.END_BEFORE_START)

    slot = draft.slot
    if slot.assigned_from is not None and draft.start_time < slot.assigned_from:
        raise ValidationError(messages.OUTSIDE_SLOT_WINDOW)
    if slot.assigned_until is not None and draft.end_time > slot.assigned_until:
        raise ValidationError(messages.OUTSIDE_SLOT_WINDOW)


class BookingOrchestrator:
    """
    Turns one validated draft into one server-side booking.

    The submit guard is an explicit Idle -> Submitting -> Submitted machine:
    a second submit while the first is in flight is rejected without a call,
    and a submit after success returns the booking already created.
    """

    def __init__(self, bookings: BookingsPort, booking_type: int = 0) -> None:
        self._bookings = bookings
        self._booking_type = booking_type
        self._state = SubmitState.IDLE
        self._booking: Booking | None = None
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> SubmitState:
        return self._state

    @property
    def booking(self) -> Booking | None:
        return self._booking

    def submit(self, draft: BookingDraft) -> Booking:
        validate_draft(draft)

        with self._lock:
            if self._state == SubmitState.SUBMITTED and self._booking is not None:
                self._logger.info("Submit ignored; booking already created", extra={"booking_id": self._booking.id})
                return self._booking
            if self._state == SubmitState.SUBMITTING:
                raise SubmissionInProgressError(messages.BOOKING_IN_PROGRESS)
            self._state = SubmitState.SUBMITTING

        try:
            booking = self._bookings.create_booking(
                ship_id=draft.ship.id,
                dock_slot_id=draft.slot.id,
                start_time=draft.start_time,
                end_time=draft.end_time,
                service_ids=draft.service_ids,
                booking_type=self._booking_type,
            )
        except AuthenticationError:
            self._release()
            raise
        except GatewayError as e:
            self._release()
            self._logger.warning("Booking rejected", extra={"status": e.status_code, "reason": e.server_message})
            raise BookingError(e.server_message or messages.BOOKING_FAILED) from e
        except NetworkError as e:
            self._release()
            self._logger.warning("Booking call failed", extra={"error": e.message})
            raise BookingError(messages.BOOKING_FAILED) from e
        except Exception:
            self._release()
            raise

        with self._lock:
            self._booking = booking
            self._state = SubmitState.SUBMITTED
        self._logger.info("Booking submitted", extra={"booking_id": booking.id, "status": booking.status})
        return booking

    def _release(self) -> None:
        with self._lock:
            self._state = SubmitState.IDLE
