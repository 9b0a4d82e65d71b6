from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from maritimehub.application.ports.session_store import SessionStorePort
from maritimehub.domain.entities.user_session import UserSession


class JsonSessionStore(SessionStorePort):
    """Persists the access token and user attributes to a JSON file so they survive app restarts."""

    def __init__(self, path: str = "./data/session.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._cached: UserSession | None = None
        self._logger = logging.getLogger(__name__)

    def get_session(self) -> UserSession:
        with self._lock:
            if self._cached is None:
                self._cached = self._load()
            return self._cached

    def save_session(self, session: UserSession) -> None:
        with self._lock:
            self._save(self._serialize(session))
            self._cached = session

    def clear(self) -> None:
        with self._lock:
            if self._path.exists():
                self._path.unlink()
            self._cached = UserSession()

    def _load(self) -> UserSession:
        """Load the session file, return an empty session if missing or corrupted."""
        if not self._path.exists():
            return UserSession()
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.warning("Session file unreadable; starting logged out", extra={"error": str(e)})
            return UserSession()
        if not isinstance(data, dict):
            return UserSession()
        return UserSession(
            access_token=data.get("access_token"),
            role=data.get("role"),
            username=data.get("username"),
            email=data.get("email"),
        )

    def _save(self, data: dict[str, Any]) -> None:
        """Write to a temp file, then rename over the target."""
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def _serialize(self, session: UserSession) -> dict[str, Any]:
        return {
            "access_token": session.access_token,
            "role": session.role,
            "username": session.username,
            "email": session.email,
            "version": 1,
        }
