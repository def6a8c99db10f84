# ecogest/services/paytech_client.py
"""PayTech payment gateway client."""
import hashlib
import hmac
import logging
from typing import Any, Dict, Optional

import httpx

from ..core.config import settings
from ..core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


class PayTechClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.paytech_api_key
        self.api_secret = api_secret if api_secret is not None else settings.paytech_api_secret
        self.base_url = (base_url or settings.paytech_base_url).rstrip("/")
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_secret)

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "API_KEY": self.api_key or "",
            "API_SECRET": self.api_secret or "",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def request_payment(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Open a payment session; returns the gateway ``token`` and ``redirect_url``."""
        if not self.configured:
            raise PaymentGatewayError("PayTech is not configured")

        url = f"{self.base_url}/payment/request-payment"
        try:
            async with httpx.AsyncClient(timeout=settings.paytech_timeout, transport=self.transport) as client:
                response = await client.post(url, headers=self.headers, json=payload)
                response.raise_for_status()
                result = response.json()
        except httpx.TimeoutException:
            logger.error("PayTech request timeout")
            raise PaymentGatewayError("Payment gateway timeout")
        except httpx.HTTPStatusError as e:
            logger.error(f"PayTech HTTP error: {e.response.status_code} - {e.response.text[:200]}")
            raise PaymentGatewayError(f"Payment gateway error: {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"PayTech request failed: {e}")
            raise PaymentGatewayError("Payment gateway unreachable")

        if str(result.get("success")) not in ("1", "True", "true") or not result.get("redirect_url"):
            logger.error(f"PayTech refused payment request: {result}")
            raise PaymentGatewayError(result.get("message") or "Payment request refused")
        return result

    def verify_notification(self, data: Dict[str, Any]) -> bool:
        """Check the sha256 key hashes PayTech sends with each IPN."""
        if not self.configured:
            return True
        expected_key = hashlib.sha256(self.api_key.encode()).hexdigest()
        expected_secret = hashlib.sha256(self.api_secret.encode()).hexdigest()
        return (
            hmac.compare_digest(expected_key, str(data.get("api_key_sha256", "")))
            and hmac.compare_digest(expected_secret, str(data.get("api_secret_sha256", "")))
        )
