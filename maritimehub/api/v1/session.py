from fastapi import APIRouter, Depends, Response

from maritimehub.api.v1.errors import to_http_exception
from maritimehub.api.v1.schemas import LoginRequestSchema, SessionSchema
from maritimehub.application.exceptions import MaritimeHubError
from maritimehub.application.ports.session_store import SessionStorePort
from maritimehub.application.use_cases.login import LoginUseCase
from maritimehub.domain.entities.user_session import UserSession
from maritimehub.wiring.dependencies import get_login_use_case, get_session_store

router = APIRouter()


def _session_schema(session: UserSession) -> SessionSchema:
    return SessionSchema(
        authenticated=session.is_authenticated,
        role=session.role,
        username=session.username,
        email=session.email,
    )


@router.post("/session/login", response_model=SessionSchema)
def login(
    req: LoginRequestSchema,
    uc: LoginUseCase = Depends(get_login_use_case),
):
    try:
        session = uc.login(req.username_or_email, req.password)
    except MaritimeHubError as e:
        raise to_http_exception(e)
    return _session_schema(session)


@router.get("/session", response_model=SessionSchema)
def current_session(store: SessionStorePort = Depends(get_session_store)):
    return _session_schema(store.get_session())


@router.delete("/session", status_code=204)
def logout(uc: LoginUseCase = Depends(get_login_use_case)):
    uc.logout()
    return Response(status_code=204)
