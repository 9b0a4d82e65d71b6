from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from pydantic import ValidationError as PydanticValidationError

from maritimehub.application.dto.backend_payloads import DockSlotDTO, ServiceDTO, ShipDTO, extract_items
from maritimehub.application.ports.backend_gateway import BackendGatewayPort
from maritimehub.application.ports.catalog import CatalogPort
from maritimehub.domain.entities.catalog import DockSlot, ServiceItem, Ship

T = TypeVar("T")

PAGE_PARAMS = {"page": 1, "size": 30}


class CatalogApi(CatalogPort):
    def __init__(self, gateway: BackendGatewayPort) -> None:
        self._gateway = gateway
        self._logger = logging.getLogger(__name__)

    def list_boatyard_services(self, boatyard_id: str) -> list[ServiceItem]:
        body = self._gateway.get(f"/boatyards/{boatyard_id}/boatyard-services", params=PAGE_PARAMS)
        return self._parse_items(body, lambda item: ServiceDTO.model_validate(item).to_entity())

    def list_dock_slots(self, boatyard_id: str) -> list[DockSlot]:
        body = self._gateway.get(f"/boatyards/{boatyard_id}/dock-slots", params=PAGE_PARAMS)
        return self._parse_items(body, lambda item: DockSlotDTO.model_validate(item).to_entity())

    def list_ships(self, search: str | None = None) -> list[Ship]:
        body = self._gateway.get("/ships", params={"deleted": "false"})
        ships = self._parse_items(body, lambda item: ShipDTO.model_validate(item).to_entity())
        return filter_ships(ships, search)

    def _parse_items(self, body: Any, parse: Callable[[dict[str, Any]], T]) -> list[T]:
        parsed: list[T] = []
        for item in extract_items(body):
            try:
                parsed.append(parse(item))
            except PydanticValidationError as e:
                self._logger.warning("Skipping malformed catalog item", extra={"error": str(e)})
        return parsed


def filter_ships(ships: list[Ship], search: str | None) -> list[Ship]:
    """Case-insensitive match on ship name or code; blank search returns everything."""
    if not search or not search.strip():
        return list(ships)
    needle = search.strip().lower()
    return [
        ship
        for ship in ships
        if needle in (ship.name or "").lower() or needle in (ship.code or "").lower()
    ]
