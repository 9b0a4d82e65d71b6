from abc import ABC, abstractmethod
from typing import Any


class BackendGatewayPort(ABC):
    @abstractmethod
    def request(
        self,
        method: str,
        endpoint: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Perform one authenticated call against the REST backend.
        Returns the decoded JSON body (None for an empty body).
        Raises GatewayError on non-2xx responses and NetworkError on transport failures.
        """
        raise NotImplementedError

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: dict[str, Any]) -> Any:
        return self.request("POST", endpoint, body=body)
