from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Iterable

from maritimehub.domain.entities.catalog import DockSlot, ServiceItem, Ship


@dataclass(frozen=True)
class BookingDraft:
    """
    Booking fields accumulated across the selection steps.

    Every ``with_*`` call returns a new draft carrying all previously set fields,
    so a step can only add to (or explicitly replace) what it owns.
    """

    boatyard_id: str
    boatyard_name: str | None = None
    services: tuple[ServiceItem, ...] = ()
    slot: DockSlot | None = None
    ship: Ship | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    def with_services(self, services: ServiceItem | Iterable[ServiceItem]) -> BookingDraft:
        if isinstance(services, ServiceItem):
            chosen: tuple[ServiceItem, ...] = (services,)
        else:
            chosen = tuple(services)
        if not chosen:
            raise ValueError("At least one service must be selected.")
        return replace(self, services=chosen)

    def with_slot(self, slot: DockSlot) -> BookingDraft:
        return replace(self, slot=slot)

    def with_ship(self, ship: Ship) -> BookingDraft:
        return replace(self, ship=ship)

    def with_times(self, start_time: datetime, end_time: datetime) -> BookingDraft:
        return replace(self, start_time=_as_utc(start_time), end_time=_as_utc(end_time))

    def with_default_times(self, now: datetime, hours: int) -> BookingDraft:
        """Fill the time window only if the user has not chosen one yet."""
        if self.start_time is not None and self.end_time is not None:
            return self
        start = _as_utc(now).replace(second=0, microsecond=0)
        return self.with_times(start, start + timedelta(hours=hours))

    @property
    def service_ids(self) -> list[str]:
        return [s.id for s in self.services]

    @property
    def total_price(self) -> int | None:
        prices = [s.price for s in self.services if s.price is not None]
        return sum(prices) if prices else None


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are read as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
