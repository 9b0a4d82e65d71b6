from abc import ABC, abstractmethod

from maritimehub.domain.entities.user_session import UserSession


class AuthPort(ABC):
    @abstractmethod
    def login(self, username_or_email: str, password: str) -> UserSession:
        raise NotImplementedError
