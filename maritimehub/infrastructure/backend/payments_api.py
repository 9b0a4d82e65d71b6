from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from maritimehub.application.dto.backend_payloads import PaymentInstructionsDTO, PaymentRequestDTO, unwrap_data
from maritimehub.application.exceptions import GatewayError
from maritimehub.application.ports.backend_gateway import BackendGatewayPort
from maritimehub.application.ports.payments import PaymentsPort
from maritimehub.domain.entities.payment_session import PaymentInstructions, PaymentTarget


class PaymentsApi(PaymentsPort):
    def __init__(self, gateway: BackendGatewayPort) -> None:
        self._gateway = gateway
        self._logger = logging.getLogger(__name__)

    def create_payment(self, target_id: str, target_type: PaymentTarget, address: str) -> PaymentInstructions:
        payload = PaymentRequestDTO(id=target_id, type=PaymentTarget(target_type).value, address=address)
        body = self._gateway.post("/payments", payload.model_dump(by_alias=True))
        data = unwrap_data(body)
        if not isinstance(data, dict):
            return PaymentInstructions()
        try:
            return PaymentInstructionsDTO.model_validate(data).to_entity()
        except PydanticValidationError as e:
            raise GatewayError(status_code=200, message="Backend returned an unexpected payment payload.") from e
