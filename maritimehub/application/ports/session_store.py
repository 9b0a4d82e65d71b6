from abc import ABC, abstractmethod

from maritimehub.domain.entities.user_session import UserSession


class SessionStorePort(ABC):
    @abstractmethod
    def get_session(self) -> UserSession:
        """Return the stored session, or an empty UserSession when logged out."""
        raise NotImplementedError

    @abstractmethod
    def save_session(self, session: UserSession) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError

    def get_token(self) -> str | None:
        return self.get_session().access_token
