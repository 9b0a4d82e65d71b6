from __future__ import annotations

import logging
from typing import Any

import httpx

from maritimehub.application.dto.backend_payloads import extract_server_message
from maritimehub.application.exceptions import AuthenticationError, GatewayError, NetworkError
from maritimehub.application.ports.backend_gateway import BackendGatewayPort
from maritimehub.application.ports.session_store import SessionStorePort
from maritimehub.core.config import settings


class HttpBackendGateway(BackendGatewayPort):
    def __init__(
        self,
        session_store: SessionStorePort,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._session_store = session_store
        self._base_url = (base_url or settings.API_BASE_URL or "").rstrip("/")
        if not self._base_url:
            raise ValueError("API_BASE_URL is required for the HTTP backend gateway")

        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    def request(
        self,
        method: str,
        endpoint: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Content-Type": "application/json"}
        token = self._session_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = self._client.request(method, endpoint, json=body, params=params, headers=headers)
        except httpx.TimeoutException as e:
            self._logger.warning("Backend request timed out", extra={"endpoint": endpoint, "error": str(e)})
            raise NetworkError("Request timed out. Please check your connection and try again.") from e
        except httpx.TransportError as e:
            self._logger.warning("Backend request failed", extra={"endpoint": endpoint, "error": str(e)})
            raise NetworkError("Network error. Please check your connection.") from e

        if resp.status_code >= 400:
            try:
                error_json = resp.json()
            except ValueError:
                error_json = None
            server_message = extract_server_message(error_json)

            self._logger.warning(
                "API error",
                extra={"endpoint": endpoint, "status": resp.status_code, "reason": server_message or resp.reason_phrase},
            )
            error_cls = AuthenticationError if resp.status_code in (401, 403) else GatewayError
            raise error_cls(
                status_code=resp.status_code,
                message=server_message or f"API error {resp.status_code}",
                server_message=server_message,
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise GatewayError(status_code=resp.status_code, message="Backend returned a non-JSON body.") from e
