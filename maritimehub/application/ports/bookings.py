from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from maritimehub.domain.entities.booking import Booking


class BookingsPort(ABC):
    @abstractmethod
    def create_booking(
        self,
        ship_id: str,
        dock_slot_id: str,
        start_time: datetime,
        end_time: datetime,
        service_ids: list[str],
        booking_type: int = 0,
    ) -> Booking:
        """POST /bookings. Returns the server-assigned booking."""
        raise NotImplementedError

    @abstractmethod
    def get_booking(self, booking_id: str) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def list_bookings(self) -> list[Booking]:
        raise NotImplementedError
