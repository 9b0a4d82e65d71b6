from __future__ import annotations

from maritimehub.application.ports.session_store import SessionStorePort
from maritimehub.domain.entities.user_session import UserSession


class MemorySessionStore(SessionStorePort):
    def __init__(self, session: UserSession | None = None) -> None:
        self._session = session or UserSession()

    def get_session(self) -> UserSession:
        return self._session

    def save_session(self, session: UserSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = UserSession()
