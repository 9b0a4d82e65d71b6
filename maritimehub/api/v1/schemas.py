from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from maritimehub.domain.entities.payment_session import PaymentTarget


class ApiSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartFlowRequestSchema(ApiSchema):
    boatyard_id: str
    boatyard_name: str | None = None


class SelectServicesRequestSchema(ApiSchema):
    service_ids: list[str] = Field(min_length=1)


class SelectSlotRequestSchema(ApiSchema):
    slot_id: str


class SelectShipRequestSchema(ApiSchema):
    ship_id: str


class SetTimesRequestSchema(ApiSchema):
    start_time: datetime
    end_time: datetime


class StartPaymentRequestSchema(ApiSchema):
    address: str | None = None


class NavigationEventSchema(ApiSchema):
    url: str


class ResumePaymentRequestSchema(ApiSchema):
    target_id: str
    target_type: PaymentTarget = PaymentTarget.BOATYARD
    amount: int | None = None
    address: str | None = None


class LoginRequestSchema(ApiSchema):
    username_or_email: str
    password: str


class SessionSchema(ApiSchema):
    authenticated: bool
    role: str | None = None
    username: str | None = None
    email: str | None = None


class ServiceSchema(ApiSchema):
    id: str
    name: str | None = None
    price: int | None = None


class DockSlotSchema(ApiSchema):
    id: str
    name: str | None = None
    assigned_from: datetime | None = None
    assigned_until: datetime | None = None


class ShipSchema(ApiSchema):
    id: str
    name: str | None = None
    code: str | None = None


class DraftSchema(ApiSchema):
    boatyard_id: str
    boatyard_name: str | None = None
    services: list[ServiceSchema] = Field(default_factory=list)
    slot: DockSlotSchema | None = None
    ship: ShipSchema | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


class BookingSchema(ApiSchema):
    id: str
    status: str
    total_amount: int | None = None
    ship_name: str | None = None
    dock_slot_name: str | None = None
    services: list[str] = Field(default_factory=list)


class TransferFieldSchema(ApiSchema):
    label: str
    value: str


class PaymentSchema(ApiSchema):
    session_id: str
    status: str
    target_id: str
    target_type: PaymentTarget
    qr_code: str | None = None
    bin: str | None = None
    account_number: str | None = None
    amount: int | None = None
    amount_label: str | None = None
    description: str | None = None
    checkout_url: str | None = None
    checkout_open: bool = False
    transfer_fields: list[TransferFieldSchema] = Field(default_factory=list)


class OutcomeScreenSchema(ApiSchema):
    kind: str
    payload: dict[str, Any]
    actions: list[str]


class FlowSchema(ApiSchema):
    flow_id: str
    stage: str
    submitting: bool = False
    draft: DraftSchema | None = None
    booking: BookingSchema | None = None
    payment: PaymentSchema | None = None
    outcome: OutcomeScreenSchema | None = None


class ConfirmResponseSchema(ApiSchema):
    next_step: str
    message: str | None = None
    payment_error: str | None = None
    flow: FlowSchema


class NavigationResponseSchema(ApiSchema):
    outcome: OutcomeScreenSchema | None = None
    checkout_open: bool


class ClosePaymentResponseSchema(ApiSchema):
    status: str  # "unconfirmed" | "settled"
    message: str | None = None
    outcome: OutcomeScreenSchema | None = None
