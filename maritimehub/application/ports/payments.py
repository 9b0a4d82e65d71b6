from __future__ import annotations

from abc import ABC, abstractmethod

from maritimehub.domain.entities.payment_session import PaymentInstructions, PaymentTarget


class PaymentsPort(ABC):
    @abstractmethod
    def create_payment(self, target_id: str, target_type: PaymentTarget, address: str) -> PaymentInstructions:
        """POST /payments. Returns the QR / bank-transfer fields and checkout URL issued by the server."""
        raise NotImplementedError
