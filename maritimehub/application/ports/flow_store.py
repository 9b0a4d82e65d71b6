from abc import ABC, abstractmethod

from maritimehub.application.use_cases.booking_flow import BookingFlow


class FlowStorePort(ABC):
    @abstractmethod
    def add(self, flow: BookingFlow) -> str:
        """Store a flow and return its token."""
        raise NotImplementedError

    @abstractmethod
    def get(self, token: str) -> BookingFlow:
        """Raises FlowNotFoundError for unknown or discarded tokens."""
        raise NotImplementedError

    @abstractmethod
    def discard(self, token: str) -> None:
        raise NotImplementedError
