from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from maritimehub.api.v1.errors import to_http_exception
from maritimehub.api.v1.schemas import (
    BookingSchema,
    ClosePaymentResponseSchema,
    ConfirmResponseSchema,
    DockSlotSchema,
    DraftSchema,
    FlowSchema,
    NavigationEventSchema,
    NavigationResponseSchema,
    OutcomeScreenSchema,
    PaymentSchema,
    ResumePaymentRequestSchema,
    SelectServicesRequestSchema,
    SelectShipRequestSchema,
    SelectSlotRequestSchema,
    ServiceSchema,
    SetTimesRequestSchema,
    ShipSchema,
    StartFlowRequestSchema,
    StartPaymentRequestSchema,
    TransferFieldSchema,
)
from maritimehub.application.exceptions import MaritimeHubError, ReconciliationAmbiguous
from maritimehub.application.ports.catalog import CatalogPort
from maritimehub.application.ports.flow_store import FlowStorePort
from maritimehub.application.use_cases.booking_flow import BookingFlow, BookingFlowFactory
from maritimehub.application.use_cases.outcome_presenter import present_outcome, transfer_fields
from maritimehub.application.utils import messages
from maritimehub.application.utils.formatting import format_vnd
from maritimehub.domain.entities.booking import Booking
from maritimehub.domain.entities.payment_outcome import PaymentOutcome
from maritimehub.infrastructure.backend.bookings_api import BookingsApi
from maritimehub.wiring.dependencies import get_bookings_api, get_catalog, get_flow_factory, get_flow_store

router = APIRouter()


def _booking_schema(booking: Booking) -> BookingSchema:
    return BookingSchema(
        id=booking.id,
        status=booking.status,
        total_amount=booking.total_amount,
        ship_name=booking.ship_name,
        dock_slot_name=booking.dock_slot_name,
        services=list(booking.services),
    )


def _outcome_schema(outcome: PaymentOutcome) -> OutcomeScreenSchema:
    screen = present_outcome(outcome)
    return OutcomeScreenSchema(kind=screen.kind, payload=screen.payload, actions=list(screen.actions))


def _flow_schema(flow: BookingFlow) -> FlowSchema:
    draft = None
    if flow.draft is not None:
        d = flow.draft
        draft = DraftSchema(
            boatyard_id=d.boatyard_id,
            boatyard_name=d.boatyard_name,
            services=[ServiceSchema(id=s.id, name=s.name, price=s.price) for s in d.services],
            slot=(
                DockSlotSchema(
                    id=d.slot.id,
                    name=d.slot.name,
                    assigned_from=d.slot.assigned_from,
                    assigned_until=d.slot.assigned_until,
                )
                if d.slot
                else None
            ),
            ship=ShipSchema(id=d.ship.id, name=d.ship.name, code=d.ship.code) if d.ship else None,
            start_time=d.start_time,
            end_time=d.end_time,
        )

    payment = None
    session = flow.payment
    if session is not None:
        instructions = session.instructions
        amount = instructions.amount if instructions and instructions.amount is not None else flow.amount
        payment = PaymentSchema(
            session_id=session.id,
            status=session.status.value,
            target_id=session.target_id,
            target_type=session.target_type,
            qr_code=instructions.qr_code if instructions else None,
            bin=instructions.bin if instructions else None,
            account_number=instructions.account_number if instructions else None,
            amount=amount,
            amount_label=format_vnd(amount),
            description=instructions.description if instructions else None,
            checkout_url=instructions.checkout_url if instructions else None,
            checkout_open=bool(flow.surface and flow.surface.is_open),
            transfer_fields=[
                TransferFieldSchema(label=label, value=value)
                for label, value in (transfer_fields(instructions) if instructions else [])
            ],
        )

    return FlowSchema(
        flow_id=flow.id,
        stage=flow.stage.value,
        submitting=flow.submitting,
        draft=draft,
        booking=_booking_schema(flow.booking) if flow.booking else None,
        payment=payment,
        outcome=_outcome_schema(flow.outcome) if flow.outcome else None,
    )


def _boatyard_of(flow: BookingFlow) -> str:
    if flow.draft is None:
        raise HTTPException(status_code=409, detail={"message": "This flow has no booking draft.", "retryable": False})
    return flow.draft.boatyard_id


@router.post("/flows", response_model=FlowSchema, status_code=201)
def start_flow(
    req: StartFlowRequestSchema,
    factory: BookingFlowFactory = Depends(get_flow_factory),
    store: FlowStorePort = Depends(get_flow_store),
):
    flow = factory.start(req.boatyard_id, req.boatyard_name)
    store.add(flow)
    return _flow_schema(flow)


@router.get("/flows/{token}", response_model=FlowSchema)
def get_flow(token: str, store: FlowStorePort = Depends(get_flow_store)):
    try:
        return _flow_schema(store.get(token))
    except MaritimeHubError as e:
        raise to_http_exception(e)


@router.delete("/flows/{token}", status_code=204)
def discard_flow(token: str, store: FlowStorePort = Depends(get_flow_store)):
    """Home action: drop every piece of flow state."""
    try:
        store.discard(token)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return Response(status_code=204)


@router.get("/flows/{token}/services", response_model=list[ServiceSchema])
def list_services(
    token: str,
    store: FlowStorePort = Depends(get_flow_store),
    catalog: CatalogPort = Depends(get_catalog),
):
    try:
        services = catalog.list_boatyard_services(_boatyard_of(store.get(token)))
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return [ServiceSchema(id=s.id, name=s.name, price=s.price) for s in services]


@router.get("/flows/{token}/dock-slots", response_model=list[DockSlotSchema])
def list_dock_slots(
    token: str,
    store: FlowStorePort = Depends(get_flow_store),
    catalog: CatalogPort = Depends(get_catalog),
):
    try:
        slots = catalog.list_dock_slots(_boatyard_of(store.get(token)))
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return [
        DockSlotSchema(id=s.id, name=s.name, assigned_from=s.assigned_from, assigned_until=s.assigned_until)
        for s in slots
    ]


@router.get("/ships", response_model=list[ShipSchema])
def list_ships(search: str | None = Query(None), catalog: CatalogPort = Depends(get_catalog)):
    try:
        ships = catalog.list_ships(search)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return [ShipSchema(id=s.id, name=s.name, code=s.code) for s in ships]


@router.put("/flows/{token}/services", response_model=FlowSchema)
def select_services(token: str, req: SelectServicesRequestSchema, store: FlowStorePort = Depends(get_flow_store)):
    try:
        flow = store.get(token)
        flow.select_services_by_id(req.service_ids)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _flow_schema(flow)


@router.put("/flows/{token}/slot", response_model=FlowSchema)
def select_slot(token: str, req: SelectSlotRequestSchema, store: FlowStorePort = Depends(get_flow_store)):
    try:
        flow = store.get(token)
        flow.select_slot_by_id(req.slot_id)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _flow_schema(flow)


@router.put("/flows/{token}/ship", response_model=FlowSchema)
def select_ship(token: str, req: SelectShipRequestSchema, store: FlowStorePort = Depends(get_flow_store)):
    try:
        flow = store.get(token)
        flow.select_ship_by_id(req.ship_id)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _flow_schema(flow)


@router.put("/flows/{token}/times", response_model=FlowSchema)
def set_times(token: str, req: SetTimesRequestSchema, store: FlowStorePort = Depends(get_flow_store)):
    try:
        flow = store.get(token)
        flow.set_times(req.start_time, req.end_time)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _flow_schema(flow)


@router.post("/flows/{token}/confirm", response_model=ConfirmResponseSchema)
def confirm(token: str, store: FlowStorePort = Depends(get_flow_store)):
    try:
        flow = store.get(token)
        result = flow.confirm()
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return ConfirmResponseSchema(
        next_step=result.next_step,
        message=messages.BOOKING_CREATED if result.booking else None,
        payment_error=result.payment_error,
        flow=_flow_schema(flow),
    )


@router.post("/flows/{token}/payment", response_model=FlowSchema)
def start_payment(
    token: str,
    req: StartPaymentRequestSchema | None = None,
    store: FlowStorePort = Depends(get_flow_store),
):
    try:
        flow = store.get(token)
        flow.start_payment(address=req.address if req else None)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _flow_schema(flow)


@router.post("/flows/{token}/payment/checkout", response_model=PaymentSchema)
def open_checkout(token: str, store: FlowStorePort = Depends(get_flow_store)):
    try:
        flow = store.get(token)
        flow.open_checkout()
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _flow_schema(flow).payment


@router.post("/flows/{token}/payment/navigation", response_model=NavigationResponseSchema)
def report_navigation(token: str, req: NavigationEventSchema, store: FlowStorePort = Depends(get_flow_store)):
    """Called by the shell for every URL the embedded checkout page navigates to."""
    try:
        flow = store.get(token)
        outcome = flow.report_navigation(req.url)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return NavigationResponseSchema(
        outcome=_outcome_schema(outcome) if outcome else None,
        checkout_open=bool(flow.surface and flow.surface.is_open),
    )


@router.post("/flows/{token}/payment/close", response_model=ClosePaymentResponseSchema)
def close_payment(token: str, store: FlowStorePort = Depends(get_flow_store)):
    try:
        flow = store.get(token)
        outcome = flow.close_payment()
    except ReconciliationAmbiguous as e:
        return ClosePaymentResponseSchema(status="unconfirmed", message=e.message)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return ClosePaymentResponseSchema(
        status="settled",
        message=outcome.message if outcome else None,
        outcome=_outcome_schema(outcome) if outcome else None,
    )


@router.post("/flows/{token}/payment/manual-complete", response_model=OutcomeScreenSchema)
def declare_manual_payment(token: str, store: FlowStorePort = Depends(get_flow_store)):
    try:
        outcome = store.get(token).declare_manual_payment()
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _outcome_schema(outcome)


@router.get("/flows/{token}/outcome", response_model=OutcomeScreenSchema)
def get_outcome(token: str, store: FlowStorePort = Depends(get_flow_store)):
    try:
        outcome = store.get(token).outcome
    except MaritimeHubError as e:
        raise to_http_exception(e)
    if outcome is None:
        raise HTTPException(status_code=404, detail={"message": "No payment outcome yet.", "retryable": False})
    return _outcome_schema(outcome)


@router.post("/flows/{token}/retry", response_model=FlowSchema)
def retry_payment(token: str, store: FlowStorePort = Depends(get_flow_store)):
    try:
        flow = store.get(token)
        flow.retry_payment()
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _flow_schema(flow)


@router.post("/payments/resume", response_model=FlowSchema, status_code=201)
def resume_payment(
    req: ResumePaymentRequestSchema,
    factory: BookingFlowFactory = Depends(get_flow_factory),
    store: FlowStorePort = Depends(get_flow_store),
):
    """Pay for an existing pending booking or a supplier order from its detail screen."""
    flow = factory.resume_payment(req.target_id, req.target_type, req.amount)
    try:
        flow.start_payment(address=req.address)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    store.add(flow)
    return _flow_schema(flow)


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
def get_booking(booking_id: str, bookings: BookingsApi = Depends(get_bookings_api)):
    try:
        return _booking_schema(bookings.get_booking(booking_id))
    except MaritimeHubError as e:
        raise to_http_exception(e)
