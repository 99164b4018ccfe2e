# app/shared/services/payment_gateway.py
import httpx
import logging
from typing import Dict, Any, Optional
from fastapi import status

from app.config.settings import settings
from app.core.exceptions import GatewayError

logger = logging.getLogger(__name__)

class PaymentGatewayClient:
    """Client for the card payment gateway (Stripe REST API)"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None
    ):
        self.api_key = api_key if api_key is not None else settings.payment_gateway_key
        self.base_url = (base_url or settings.payment_gateway_url).rstrip("/")
        self.timeout = timeout or settings.payment_gateway_timeout

    def _get_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def create_payment_intent(self, amount: int, currency: str) -> Dict[str, Any]:
        """
        Create a card payment intent for `amount` minor units.
        Returns the gateway's intent object, including `client_secret`.
        """
        if not self.api_key:
            raise GatewayError("Payment gateway is not configured", status.HTTP_503_SERVICE_UNAVAILABLE)

        data = {
            "amount": amount,
            "currency": currency,
            "payment_method_types[]": "card",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}/payment_intents",
                    data=data,
                    headers=self._get_headers()
                )
        except httpx.TimeoutException:
            logger.error(f"Timeout creating payment intent for {amount} {currency}")
            raise GatewayError("Payment gateway timed out", status.HTTP_504_GATEWAY_TIMEOUT)
        except httpx.HTTPError as e:
            logger.error(f"Error contacting payment gateway: {e}")
            raise GatewayError(f"Error contacting payment gateway: {str(e)}")

        if response.status_code != 200:
            error_message = response.text
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and isinstance(body.get("error"), dict):
                error_message = body["error"].get("message", response.text)
            logger.error(f"Payment gateway error: {response.status_code} - {error_message}")
            raise GatewayError(f"Payment gateway error: {error_message}")

        intent = response.json()
        logger.info(f"Payment intent {intent.get('id')} created for {amount} {currency}")
        return intent


def get_payment_gateway() -> PaymentGatewayClient:
    """Gateway dependency for FastAPI"""
    return PaymentGatewayClient()
