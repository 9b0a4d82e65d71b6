"""
Tests for the HTTP backend gateway and the REST adapters built on it.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from maritimehub.application.exceptions import AuthenticationError, GatewayError, NetworkError
from maritimehub.domain.entities.payment_session import PaymentTarget
from maritimehub.domain.entities.user_session import UserSession
from maritimehub.infrastructure.backend.auth_api import AuthApi
from maritimehub.infrastructure.backend.bookings_api import BookingsApi
from maritimehub.infrastructure.backend.catalog_api import CatalogApi
from maritimehub.infrastructure.backend.http_gateway import HttpBackendGateway
from maritimehub.infrastructure.backend.payments_api import PaymentsApi
from maritimehub.infrastructure.store.memory_session_store import MemorySessionStore

BASE_URL = "https://api.maritimehub.test/api"


def _gateway(handler, token: str | None = "tok-123") -> HttpBackendGateway:
    store = MemorySessionStore(UserSession(access_token=token) if token else None)
    return HttpBackendGateway(store, base_url=BASE_URL, timeout=5.0, transport=httpx.MockTransport(handler))


def test_bearer_token_and_json_body_are_sent():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"ok": True}})

    body = _gateway(handler).post("/bookings", {"shipId": "SH1"})

    assert body == {"data": {"ok": True}}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/api/bookings"
    assert request.headers["Authorization"] == "Bearer tok-123"
    assert json.loads(request.content) == {"shipId": "SH1"}


def test_no_authorization_header_when_logged_out():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    _gateway(handler, token=None).get("/ships", params={"deleted": "false"})

    assert "Authorization" not in seen[0].headers
    assert seen[0].url.params["deleted"] == "false"


def test_error_status_carries_server_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Dock slot not found"})

    with pytest.raises(GatewayError) as exc:
        _gateway(handler).post("/bookings", {})

    assert exc.value.status_code == 400
    assert exc.value.server_message == "Dock slot not found"
    assert exc.value.message == "Dock slot not found"


def test_error_without_body_uses_status_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="oops")

    with pytest.raises(GatewayError) as exc:
        _gateway(handler).get("/bookings")

    assert exc.value.server_message is None
    assert exc.value.message == "API error 500"


@pytest.mark.parametrize("status", [401, 403])
def test_unauthorized_is_authentication_error(status):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"title": "Unauthorized"})

    with pytest.raises(AuthenticationError) as exc:
        _gateway(handler).get("/bookings")

    assert exc.value.status_code == status
    assert exc.value.retryable is False


def test_timeout_is_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(NetworkError):
        _gateway(handler).get("/bookings")


def test_connection_failure_is_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError):
        _gateway(handler).get("/bookings")


def test_empty_body_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    assert _gateway(handler).get("/bookings") is None


def test_missing_base_url_is_rejected(monkeypatch):
    from maritimehub.core.config import settings

    monkeypatch.setattr(settings, "API_BASE_URL", None)
    with pytest.raises(ValueError):
        HttpBackendGateway(MemorySessionStore(), base_url=None)


def test_create_booking_sends_wire_payload_and_parses_envelope():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={
                "data": {
                    "id": "BK1",
                    "status": "Pending",
                    "totalAmount": 1500000.0,
                    "shipName": "Sea Breeze",
                    "dockSlotName": "Berth A1",
                    "services": [{"id": "SVC1", "typeService": "Hull cleaning"}],
                    "startTime": "2030-05-01T08:00:00.000Z",
                    "endTime": "2030-05-01T10:00:00.000Z",
                }
            },
        )

    api = BookingsApi(_gateway(handler))
    booking = api.create_booking(
        ship_id="SH1",
        dock_slot_id="S1",
        start_time=datetime(2030, 5, 1, 8, 0, tzinfo=timezone.utc),
        end_time=datetime(2030, 5, 1, 10, 0, tzinfo=timezone.utc),
        service_ids=["SVC1"],
    )

    assert seen[0] == {
        "shipId": "SH1",
        "dockSlotId": "S1",
        "startTime": "2030-05-01T08:00:00.000Z",
        "endTime": "2030-05-01T10:00:00.000Z",
        "type": 0,
        "services": ["SVC1"],
    }
    assert booking.id == "BK1"
    assert booking.is_pending
    assert booking.total_amount == 1500000
    assert booking.services == ("Hull cleaning",)
    assert booking.start_time == datetime(2030, 5, 1, 8, 0, tzinfo=timezone.utc)


def test_list_bookings_skips_malformed_items():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"items": [{"id": "BK1", "status": "Confirmed"}, {"status": "x"}]}})

    bookings = BookingsApi(_gateway(handler)).list_bookings()

    assert [b.id for b in bookings] == ["BK1"]
    assert bookings[0].is_confirmed


def test_create_payment_sends_target_and_address():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(
            200,
            json={"data": {"qrCode": "000201", "bin": "970422", "accountNumber": "01", "amount": 100, "checkoutUrl": ""}},
        )

    instructions = PaymentsApi(_gateway(handler)).create_payment("BK1", PaymentTarget.BOATYARD, "Trực tuyến")

    assert seen[0] == {"id": "BK1", "type": "Boatyard", "address": "Trực tuyến"}
    assert instructions.bin == "970422"
    assert instructions.checkout_url is None
    assert instructions.has_checkout_page is False


def test_catalog_reads_paged_items_and_filters_ships():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/boatyard-services"):
            assert request.url.params["size"] == "30"
            return httpx.Response(200, json={"data": {"items": [{"id": "SVC1", "typeService": "Hull cleaning", "price": 10}]}})
        if request.url.path.endswith("/ships"):
            return httpx.Response(
                200,
                json={"data": {"items": [{"id": "SH1", "name": "Sea Breeze", "code": "VN-0001"}, {"id": "SH2", "name": "Ocean Star", "code": "VN-0002"}]}},
            )
        return httpx.Response(404)

    catalog = CatalogApi(_gateway(handler))

    services = catalog.list_boatyard_services("BY1")
    assert services[0].name == "Hull cleaning"
    assert [s.id for s in catalog.list_ships("ocean")] == ["SH2"]
    assert [s.id for s in catalog.list_ships("vn-0001")] == ["SH1"]
    assert len(catalog.list_ships("  ")) == 2


def test_login_parses_token():
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {"usernameOrEmail": "captain", "password": "secret"}
        return httpx.Response(200, json={"data": {"accessToken": "jwt", "role": "Captain", "username": "captain"}})

    session = AuthApi(_gateway(handler, token=None)).login("captain", "secret")

    assert session.access_token == "jwt"
    assert session.role == "Captain"
