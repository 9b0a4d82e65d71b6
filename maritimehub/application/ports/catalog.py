from __future__ import annotations

from abc import ABC, abstractmethod

from maritimehub.domain.entities.catalog import DockSlot, ServiceItem, Ship


class CatalogPort(ABC):
    @abstractmethod
    def list_boatyard_services(self, boatyard_id: str) -> list[ServiceItem]:
        raise NotImplementedError

    @abstractmethod
    def list_dock_slots(self, boatyard_id: str) -> list[DockSlot]:
        raise NotImplementedError

    @abstractmethod
    def list_ships(self, search: str | None = None) -> list[Ship]:
        """List the user's ships, optionally filtered by name or code."""
        raise NotImplementedError
