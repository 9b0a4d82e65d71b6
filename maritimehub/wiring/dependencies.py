from functools import lru_cache
import logging

from maritimehub.core.config import settings
from maritimehub.application.ports.backend_gateway import BackendGatewayPort
from maritimehub.application.ports.flow_store import FlowStorePort
from maritimehub.application.ports.session_store import SessionStorePort
from maritimehub.application.use_cases.booking_flow import BookingFlowFactory
from maritimehub.application.use_cases.booking_orchestrator import BookingOrchestrator
from maritimehub.application.use_cases.login import LoginUseCase
from maritimehub.application.use_cases.payment_sessions import PaymentSessionService
from maritimehub.infrastructure.backend.auth_api import AuthApi
from maritimehub.infrastructure.backend.bookings_api import BookingsApi
from maritimehub.infrastructure.backend.catalog_api import CatalogApi
from maritimehub.infrastructure.backend.http_gateway import HttpBackendGateway
from maritimehub.infrastructure.backend.mock_gateway import MockBackendGateway
from maritimehub.infrastructure.backend.payments_api import PaymentsApi
from maritimehub.infrastructure.checkout.embedded_surface import EmbeddedCheckoutSurface
from maritimehub.infrastructure.store.json_session_store import JsonSessionStore
from maritimehub.infrastructure.store.memory_flow_store import MemoryFlowStore
from maritimehub.infrastructure.store.memory_session_store import MemorySessionStore


_session_store: SessionStorePort | None = None
_flow_store: FlowStorePort | None = None


def get_session_store() -> SessionStorePort:
    global _session_store
    if _session_store is None:
        if settings.ENV.lower() in {"test"}:
            _session_store = MemorySessionStore()
        else:
            _session_store = JsonSessionStore(path=settings.SESSION_STORE_PATH)
    return _session_store


@lru_cache
def get_gateway() -> BackendGatewayPort:
    logger = logging.getLogger(__name__)
    if not settings.API_BASE_URL:
        if settings.ENV.lower() in {"dev", "local", "test"}:
            logger.info("Using MockBackendGateway (API_BASE_URL missing, ENV=%s)", settings.ENV)
            return MockBackendGateway()
        raise ValueError("API_BASE_URL is required outside dev/local.")

    logger.info("Using HttpBackendGateway", extra={"endpoint": settings.API_BASE_URL})
    return HttpBackendGateway(session_store=get_session_store())


@lru_cache
def get_payment_session_service() -> PaymentSessionService:
    return PaymentSessionService(
        payments=PaymentsApi(get_gateway()),
        default_address=settings.DEFAULT_PAYMENT_ADDRESS,
    )


def get_catalog() -> CatalogApi:
    return CatalogApi(get_gateway())


def get_flow_factory() -> BookingFlowFactory:
    bookings = BookingsApi(get_gateway())
    return BookingFlowFactory(
        catalog=get_catalog(),
        bookings_factory=lambda: BookingOrchestrator(bookings, booking_type=settings.BOOKING_TYPE),
        payments=get_payment_session_service(),
        surface_factory=EmbeddedCheckoutSurface,
        payment_mode=settings.BOOKING_PAYMENT_MODE,
        default_hours=settings.DEFAULT_BOOKING_HOURS,
    )


def get_flow_store() -> FlowStorePort:
    global _flow_store
    if _flow_store is None:
        _flow_store = MemoryFlowStore()
    return _flow_store


def get_bookings_api() -> BookingsApi:
    return BookingsApi(get_gateway())


def get_login_use_case() -> LoginUseCase:
    return LoginUseCase(auth=AuthApi(get_gateway()), store=get_session_store())
