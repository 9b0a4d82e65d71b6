from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELED = "Canceled"


@dataclass(frozen=True)
class Booking:
    id: str
    status: str  # a BookingStatus value, or the server's string verbatim if unknown
    total_amount: int | None = None
    ship_name: str | None = None
    dock_slot_name: str | None = None
    services: tuple[str, ...] = field(default_factory=tuple)
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == BookingStatus.PENDING.value

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingStatus.CONFIRMED.value
