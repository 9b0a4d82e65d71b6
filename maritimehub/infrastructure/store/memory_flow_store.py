from __future__ import annotations

import logging
import threading

from maritimehub.application.exceptions import FlowNotFoundError
from maritimehub.application.ports.flow_store import FlowStorePort
from maritimehub.application.use_cases.booking_flow import BookingFlow


class MemoryFlowStore(FlowStorePort):
    """Flows keyed by token; each flow owns its own draft and payment state."""

    def __init__(self, limit: int = 500) -> None:
        self._flows: dict[str, BookingFlow] = {}
        self._lock = threading.Lock()
        self._limit = limit
        self._logger = logging.getLogger(__name__)

    def add(self, flow: BookingFlow) -> str:
        with self._lock:
            self._flows[flow.id] = flow
            if len(self._flows) > self._limit:
                oldest = next(iter(self._flows))
                evicted = self._flows.pop(oldest)
                evicted.discard()
                self._logger.info("Evicted oldest flow", extra={"flow_id": oldest})
        return flow.id

    def get(self, token: str) -> BookingFlow:
        with self._lock:
            flow = self._flows.get(token)
        if flow is None:
            raise FlowNotFoundError("Booking flow not found.")
        return flow

    def discard(self, token: str) -> None:
        with self._lock:
            flow = self._flows.pop(token, None)
        if flow is None:
            raise FlowNotFoundError("Booking flow not found.")
        flow.discard()
