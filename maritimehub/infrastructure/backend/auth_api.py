from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError

from maritimehub.application.dto.backend_payloads import LoginResponseDTO, unwrap_data
from maritimehub.application.exceptions import AuthenticationError
from maritimehub.application.ports.auth import AuthPort
from maritimehub.application.ports.backend_gateway import BackendGatewayPort
from maritimehub.domain.entities.user_session import UserSession


class AuthApi(AuthPort):
    def __init__(self, gateway: BackendGatewayPort) -> None:
        self._gateway = gateway

    def login(self, username_or_email: str, password: str) -> UserSession:
        body = self._gateway.post("/auth/login", {"usernameOrEmail": username_or_email, "password": password})
        try:
            dto = LoginResponseDTO.model_validate(unwrap_data(body))
        except PydanticValidationError as e:
            raise AuthenticationError(status_code=200, message="Invalid credentials") from e
        return UserSession(access_token=dto.access_token, role=dto.role, username=dto.username, email=dto.email)
