"""
HTTP Client for the payment provider (payment links) with retry logic
"""
import logging
from decimal import Decimal
from typing import Dict, List, Optional

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from app.config import settings
from app.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class PaymentProviderClient:
    """Client for creating and reading payment links"""

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.PAYMENT_API_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.PAYMENT_API_KEY
        self.timeout = timeout or settings.PAYMENT_TIMEOUT

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-API-KEY": self.api_key,
            "Content-Type": "application/json"
        }

    # Only connection failures are retried: a timed-out POST may already
    # have created a link on the provider side.
    @retry(
        stop=stop_after_attempt(settings.MAX_RETRIES),
        wait=wait_exponential(multiplier=settings.RETRY_DELAY, min=1, max=10),
        retry=retry_if_exception_type(httpx.ConnectError),
        reraise=True
    )
    async def _post_link(self, payload: Dict) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(f"{self.base_url}/links", json=payload, headers=self.headers)

    @retry(
        stop=stop_after_attempt(settings.MAX_RETRIES),
        wait=wait_exponential(multiplier=settings.RETRY_DELAY, min=1, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
        reraise=True
    )
    async def _get_link(self, payment_id: str) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(f"{self.base_url}/links/{payment_id}", headers=self.headers)

    async def create_link(
        self,
        order_id: int,
        amount: Decimal,
        items: List[Dict],
        currency: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Create a payment link for an order

        Args:
            order_id: Order ID (used in the note and redirect URLs)
            amount: Total amount to charge
            items: Line items (name, amount, quantity)
            currency: Currency code

        Returns:
            {"payment_id": ..., "payment_url": ...}

        Raises:
            ExternalServiceError: If the provider call fails or times out
        """
        payload = {
            "currency": currency or settings.CURRENCY,
            "title": "Shop Order",
            "note": f"Order ID: {order_id}",
            "amount": str(amount),
            "items": items,
            "success_url": f"{settings.FRONTEND_URL}/payment-success?orderId={order_id}",
            "failure_url": f"{settings.FRONTEND_URL}/payment-failure?orderId={order_id}",
            "shipping_address_required": True
        }

        try:
            response = await self._post_link(payload)
        except httpx.HTTPError as e:
            logger.error("Payment provider unavailable while creating link for order %s: %s", order_id, e)
            raise ExternalServiceError(f"Payment provider unavailable: {e}")

        if response.status_code not in (200, 201):
            logger.error(
                "Payment provider rejected link for order %s: %s %s",
                order_id, response.status_code, response.text
            )
            raise ExternalServiceError(f"Payment creation failed: provider returned {response.status_code}")

        data = response.json()
        payment_id = data.get("id") or data.get("link_id")
        payment_url = data.get("url") or data.get("checkout_url")
        if not payment_id or not payment_url:
            raise ExternalServiceError("Payment creation failed: provider response missing id or url")

        return {"payment_id": str(payment_id), "payment_url": payment_url}

    async def get_link_status(self, payment_id: str) -> str:
        """
        Read the provider-side status of a payment link

        Returns:
            Raw provider status string (may be empty)

        Raises:
            ExternalServiceError: If the provider call fails
        """
        try:
            response = await self._get_link(payment_id)
        except httpx.HTTPError as e:
            logger.error("Payment provider unavailable while reading %s: %s", payment_id, e)
            raise ExternalServiceError(f"Payment provider unavailable: {e}")

        if response.status_code != 200:
            raise ExternalServiceError(f"Payment lookup failed: provider returned {response.status_code}")

        return str(response.json().get("status") or "")
