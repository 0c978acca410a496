from __future__ import annotations

from typing import Any, Dict

import mercadopago

from blessed_api.common.exceptions import PaymentGatewayError
from blessed_api.common.logger import logger


class PaymentGateway:
    """
    Тонкая обёртка над Mercado Pago SDK: preference (checkout) и payment (webhook).
    SDK отдаёт {"status": <http>, "response": {...}}; не-2xx -> PaymentGatewayError.
    """

    def __init__(self, access_token: str) -> None:
        self._sdk = mercadopago.SDK(access_token)

    @staticmethod
    def _unwrap(result: Dict[str, Any], action: str) -> Dict[str, Any]:
        status = result.get("status")
        response = result.get("response") or {}
        if not isinstance(status, int) or not 200 <= status < 300:
            logger.warning("Mercado Pago %s failed: status=%s response=%s", action, status, response)
            raise PaymentGatewayError(f"Mercado Pago {action} failed with status {status}")
        return response

    def create_preference(self, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self._sdk.preference().create(body)
        except Exception as exc:
            raise PaymentGatewayError("Mercado Pago preference request failed") from exc
        return self._unwrap(result, "preference.create")

    def get_payment(self, payment_id: Any) -> Dict[str, Any]:
        try:
            result = self._sdk.payment().get(payment_id)
        except Exception as exc:
            raise PaymentGatewayError(f"Mercado Pago payment {payment_id} lookup failed") from exc
        return self._unwrap(result, "payment.get")
