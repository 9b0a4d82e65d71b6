from __future__ import annotations

import logging

from maritimehub.application.exceptions import ValidationError
from maritimehub.application.ports.auth import AuthPort
from maritimehub.application.ports.session_store import SessionStorePort
from maritimehub.domain.entities.user_session import UserSession


class LoginUseCase:
    def __init__(self, auth: AuthPort, store: SessionStorePort) -> None:
        self._auth = auth
        self._store = store
        self._logger = logging.getLogger(__name__)

    def login(self, username_or_email: str, password: str) -> UserSession:
        if not username_or_email.strip() or not password:
            raise ValidationError("Please enter username/email and password.")
        session = self._auth.login(username_or_email.strip(), password)
        self._store.save_session(session)
        self._logger.info("Logged in", extra={"status": session.role})
        return session

    def logout(self) -> None:
        self._store.clear()
        self._logger.info("Logged out")
