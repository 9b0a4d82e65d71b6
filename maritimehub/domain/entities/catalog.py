from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ServiceItem:
    id: str
    name: str | None = None  # typeService on the wire
    price: int | None = None


@dataclass(frozen=True)
class DockSlot:
    id: str
    name: str | None = None
    assigned_from: datetime | None = None
    assigned_until: datetime | None = None


@dataclass(frozen=True)
class Ship:
    id: str
    name: str | None = None
    code: str | None = None
