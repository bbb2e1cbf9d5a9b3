# online_forms/services/gateway.py
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from online_forms.config import settings

logger = logging.getLogger(__name__)

CAPTURED_STATUS = "captured"


class GatewayError(Exception):
    """Gateway unreachable, or it rejected the request."""


class RazorpayGateway:
    """
    Thin client over the Razorpay REST API. One instance is built at process
    start (see main.py) and handed to routes through get_payment_gateway.
    """

    name = "razorpay"

    def __init__(self, key_id: str, key_secret: str, base_url: str = "https://api.razorpay.com/v1",
                 timeout: float = 15.0, client: Optional[httpx.Client] = None):
        self.key_id = key_id
        self._key_secret = key_secret
        self._client = client or httpx.Client(
            base_url=base_url,
            auth=(key_id, key_secret),
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls) -> "RazorpayGateway":
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_API_URL,
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
        )

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.RequestError as e:
            logger.error(f"[Razorpay] Request error on {path}: {e}")
            raise GatewayError(f"Gateway unreachable: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"[Razorpay] HTTP {e.response.status_code} on {path}: {e.response.text}")
            raise GatewayError(f"Gateway rejected the request ({e.response.status_code})") from e

    def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, Any]) -> Dict[str, Any]:
        """amount is in minor units (paise, cents)."""
        order = self._request("POST", "/orders", json={
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
        })
        logger.info(f"[Razorpay] Order {order.get('id')} created for {amount} {currency}")
        return order

    def fetch_payment(self, gateway_payment_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/payments/{gateway_payment_id}")

    def expected_signature(self, gateway_order_id: str, gateway_payment_id: str) -> str:
        body = f"{gateway_order_id}|{gateway_payment_id}"
        return hmac.new(self._key_secret.encode(), body.encode(), hashlib.sha256).hexdigest()

    def verify_signature(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> bool:
        expected = self.expected_signature(gateway_order_id, gateway_payment_id)
        return hmac.compare_digest(expected.encode(), (signature or "").encode())

    def close(self):
        self._client.close()


def get_payment_gateway(request: Request) -> RazorpayGateway:
    return request.app.state.payment_gateway
