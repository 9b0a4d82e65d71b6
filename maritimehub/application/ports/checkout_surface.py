from abc import ABC, abstractmethod


class CheckoutSurfacePort(ABC):
    """The embedded browser that hosts the external checkout page."""

    @abstractmethod
    def open(self, checkout_url: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def is_open(self) -> bool:
        raise NotImplementedError
