from __future__ import annotations

import logging
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError

from maritimehub.application.dto.backend_payloads import (
    BookingDTO,
    CreateBookingRequestDTO,
    extract_items,
    unwrap_data,
)
from maritimehub.application.exceptions import GatewayError
from maritimehub.application.ports.backend_gateway import BackendGatewayPort
from maritimehub.application.ports.bookings import BookingsPort
from maritimehub.application.utils.timestamps import to_wire_timestamp
from maritimehub.domain.entities.booking import Booking


class BookingsApi(BookingsPort):
    def __init__(self, gateway: BackendGatewayPort) -> None:
        self._gateway = gateway
        self._logger = logging.getLogger(__name__)

    def create_booking(
        self,
        ship_id: str,
        dock_slot_id: str,
        start_time: datetime,
        end_time: datetime,
        service_ids: list[str],
        booking_type: int = 0,
    ) -> Booking:
        payload = CreateBookingRequestDTO(
            ship_id=ship_id,
            dock_slot_id=dock_slot_id,
            start_time=to_wire_timestamp(start_time),
            end_time=to_wire_timestamp(end_time),
            type=booking_type,
            services=service_ids,
        )
        body = self._gateway.post("/bookings", payload.model_dump(by_alias=True))
        booking = _parse_booking(body)
        self._logger.info("Booking created", extra={"booking_id": booking.id, "status": booking.status})
        return booking

    def get_booking(self, booking_id: str) -> Booking:
        return _parse_booking(self._gateway.get(f"/bookings/{booking_id}"))

    def list_bookings(self) -> list[Booking]:
        bookings: list[Booking] = []
        for item in extract_items(self._gateway.get("/bookings")):
            try:
                bookings.append(BookingDTO.model_validate(item).to_entity())
            except PydanticValidationError:
                self._logger.warning("Skipping malformed booking item", extra={"reason": str(item.get("id"))})
        return bookings


def _parse_booking(body: object) -> Booking:
    data = unwrap_data(body)
    try:
        return BookingDTO.model_validate(data).to_entity()
    except PydanticValidationError as e:
        raise GatewayError(status_code=200, message="Backend returned an unexpected booking payload.") from e
