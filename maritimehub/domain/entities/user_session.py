from dataclasses import dataclass


@dataclass(frozen=True)
class UserSession:
    access_token: str | None = None
    role: str | None = None
    username: str | None = None
    email: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)
