from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from maritimehub.application.utils.timestamps import parse_wire_timestamp
from maritimehub.domain.entities.booking import Booking
from maritimehub.domain.entities.catalog import DockSlot, ServiceItem, Ship
from maritimehub.domain.entities.payment_session import PaymentInstructions


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


def _round_amount(value: Any) -> Any:
    if isinstance(value, float):
        return int(round(value))
    return value


def unwrap_data(body: Any) -> Any:
    """The backend wraps most payloads as {"data": ...}; accept both shapes."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def extract_items(body: Any) -> list[dict[str, Any]]:
    data = unwrap_data(body)
    if isinstance(data, dict):
        data = data.get("items") or []
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


def extract_server_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    for key in ("message", "detail", "title"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


class CreateBookingRequestDTO(_WireModel):
    ship_id: str
    dock_slot_id: str
    start_time: str
    end_time: str
    type: int = 0
    services: list[str] = Field(min_length=1)


class BookingDTO(_WireModel):
    id: str
    status: str = "Pending"
    total_amount: int | None = None
    ship_name: str | None = None
    dock_slot_name: str | None = None
    services: list[Any] = Field(default_factory=list)
    start_time: str | None = None
    end_time: str | None = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def round_total_amount(cls, value: Any) -> Any:
        return _round_amount(value)

    def to_entity(self) -> Booking:
        names: list[str] = []
        for service in self.services:
            if isinstance(service, dict):
                name = service.get("typeService") or service.get("name") or service.get("serviceName")
                if name:
                    names.append(str(name))
            elif service is not None:
                names.append(str(service))
        return Booking(
            id=self.id,
            status=self.status,
            total_amount=self.total_amount,
            ship_name=self.ship_name,
            dock_slot_name=self.dock_slot_name,
            services=tuple(names),
            start_time=parse_wire_timestamp(self.start_time),
            end_time=parse_wire_timestamp(self.end_time),
        )


class PaymentRequestDTO(_WireModel):
    id: str
    type: str
    address: str


class PaymentInstructionsDTO(_WireModel):
    qr_code: str | None = None
    bin: str | None = None
    account_number: str | None = None
    amount: int | None = None
    description: str | None = None
    checkout_url: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def round_amount(cls, value: Any) -> Any:
        return _round_amount(value)

    def to_entity(self) -> PaymentInstructions:
        return PaymentInstructions(
            qr_code=self.qr_code or None,
            bin=self.bin or None,
            account_number=self.account_number or None,
            amount=self.amount,
            description=self.description or None,
            checkout_url=self.checkout_url or None,
        )


class ServiceDTO(_WireModel):
    id: str
    type_service: str | None = None
    name: str | None = None
    price: int | None = None

    @field_validator("price", mode="before")
    @classmethod
    def round_price(cls, value: Any) -> Any:
        return _round_amount(value)

    def to_entity(self) -> ServiceItem:
        return ServiceItem(id=self.id, name=self.type_service or self.name, price=self.price)


class DockSlotDTO(_WireModel):
    id: str
    name: str | None = None
    assigned_from: str | None = None
    assigned_until: str | None = None

    def to_entity(self) -> DockSlot:
        return DockSlot(
            id=self.id,
            name=self.name,
            assigned_from=parse_wire_timestamp(self.assigned_from),
            assigned_until=parse_wire_timestamp(self.assigned_until),
        )


class ShipDTO(_WireModel):
    id: str
    name: str | None = None
    code: str | None = None

    def to_entity(self) -> Ship:
        return Ship(id=self.id, name=self.name, code=self.code)


class LoginResponseDTO(_WireModel):
    access_token: str
    role: str | None = None
    username: str | None = None
    email: str | None = None
