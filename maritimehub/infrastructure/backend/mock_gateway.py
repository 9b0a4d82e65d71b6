from __future__ import annotations

import logging
import re
import threading
from typing import Any

from maritimehub.application.exceptions import AuthenticationError, GatewayError
from maritimehub.application.ports.backend_gateway import BackendGatewayPort

_BOOKING_PATH = re.compile(r"^/bookings/(?P<id>[^/]+)$")
_BOATYARD_PATH = re.compile(r"^/boatyards/(?P<id>[^/]+)/(?P<resource>dock-slots|boatyard-services)$")

MOCK_CHECKOUT_BASE = "https://pay.mock.local/web"


class MockBackendGateway(BackendGatewayPort):
    """In-memory stand-in for the marketplace REST API, used in dev and tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._bookings: dict[str, dict[str, Any]] = {}
        self._payments: list[dict[str, Any]] = []
        self._services: dict[str, list[dict[str, Any]]] = {
            "BY1": [
                {"id": "SVC1", "typeService": "Hull cleaning", "price": 1500000},
                {"id": "SVC2", "typeService": "Engine check", "price": 800000},
            ],
        }
        self._slots: dict[str, list[dict[str, Any]]] = {
            "BY1": [
                {
                    "id": "S1",
                    "name": "Berth A1",
                    "assignedFrom": "2025-01-01T00:00:00Z",
                    "assignedUntil": "2035-12-31T23:59:59Z",
                },
            ],
        }
        self._ships: list[dict[str, Any]] = [
            {"id": "SH1", "name": "Sea Breeze", "code": "VN-0001"},
            {"id": "SH2", "name": "Ocean Star", "code": "VN-0002"},
        ]
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []
        self._logger = logging.getLogger(__name__)

    def request(
        self,
        method: str,
        endpoint: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        method = method.upper()
        with self._lock:
            self.calls.append((method, endpoint, body))
        self._logger.info("Mock backend call", extra={"endpoint": f"{method} {endpoint}"})

        if endpoint == "/auth/login" and method == "POST":
            return self._login(body or {})

        if endpoint == "/bookings" and method == "POST":
            return self._create_booking(body or {})
        if endpoint == "/bookings" and method == "GET":
            return {"data": {"items": list(self._bookings.values())}}
        if endpoint == "/payments" and method == "POST":
            return self._create_payment(body or {})
        if endpoint == "/ships" and method == "GET":
            return {"data": {"items": list(self._ships)}}

        match = _BOOKING_PATH.match(endpoint)
        if match and method == "GET":
            booking = self._bookings.get(match.group("id"))
            if booking is None:
                raise GatewayError(status_code=404, message="Booking not found", server_message="Booking not found")
            return {"data": booking}

        match = _BOATYARD_PATH.match(endpoint)
        if match and method == "GET":
            source = self._slots if match.group("resource") == "dock-slots" else self._services
            return {"data": {"items": list(source.get(match.group("id"), []))}}

        raise GatewayError(status_code=404, message="API error 404", server_message=None)

    def _login(self, body: dict[str, Any]) -> Any:
        if not body.get("usernameOrEmail") or not body.get("password"):
            raise AuthenticationError(status_code=401, message="Invalid credentials", server_message="Invalid credentials")
        return {
            "data": {
                "accessToken": f"mock-token-{body['usernameOrEmail']}",
                "role": "Captain",
                "username": body["usernameOrEmail"],
            }
        }

    def _create_booking(self, body: dict[str, Any]) -> Any:
        slot_id = body.get("dockSlotId")
        known_slots = {slot["id"]: slot for slots in self._slots.values() for slot in slots}
        if slot_id not in known_slots:
            raise GatewayError(status_code=400, message="Dock slot not found", server_message="Dock slot not found")
        services = {svc["id"]: svc for svcs in self._services.values() for svc in svcs}
        chosen = [services[s] for s in body.get("services", []) if s in services]
        ship = next((s for s in self._ships if s["id"] == body.get("shipId")), None)

        with self._lock:
            booking_id = f"BK{len(self._bookings) + 1}"
            booking = {
                "id": booking_id,
                "status": "Pending",
                "totalAmount": sum(svc["price"] for svc in chosen),
                "shipName": ship["name"] if ship else None,
                "dockSlotName": known_slots[slot_id]["name"],
                "services": [{"id": svc["id"], "typeService": svc["typeService"]} for svc in chosen],
                "startTime": body.get("startTime"),
                "endTime": body.get("endTime"),
            }
            self._bookings[booking_id] = booking
        return {"data": booking}

    def _create_payment(self, body: dict[str, Any]) -> Any:
        target_id = str(body.get("id") or "")
        amount = self._bookings.get(target_id, {}).get("totalAmount", 0)
        with self._lock:
            order_code = len(self._payments) + 1
            payment = {
                "qrCode": f"00020101021238570010A000000727012700069704220113MOCK{order_code:06d}",
                "bin": "970422",
                "accountNumber": "0123456789",
                "amount": amount,
                "description": f"TT {target_id}",
                "checkoutUrl": f"{MOCK_CHECKOUT_BASE}/{order_code}",
            }
            self._payments.append(payment)
        return {"data": payment}
