"""
Stripe catalogue and checkout calls.

Wraps ``stripe.StripeClient`` and its async v1 services. A missing secret
key fails before any request, and every SDK error surfaces as
``UpstreamFailure``.
"""

from typing import Any, Dict, List, Optional

import stripe
import structlog

from decisionhub.errors import UpstreamFailure

logger = structlog.get_logger(__name__)


def _drop_none(params: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in params.items() if value is not None}


class StripeAPI:
    def __init__(
        self,
        http_client: stripe.HTTPClient,
        secret_key: str,
        api_url: str = "https://api.stripe.com",
        api_version: Optional[str] = None,
        max_network_retries: int = 2,
    ):
        self.http_client = http_client
        self.secret_key = secret_key
        self.api_url = api_url.rstrip("/")
        self.api_version = api_version or None
        self.max_network_retries = max_network_retries
        self._client: Optional[stripe.StripeClient] = None
        if not secret_key:
            logger.warning("stripe_secret_key_missing")

    @property
    def client(self) -> stripe.StripeClient:
        if not self.secret_key:
            raise UpstreamFailure("Stripe secret key not configured")
        if self._client is None:
            self._client = stripe.StripeClient(
                self.secret_key,
                http_client=self.http_client,
                base_addresses={"api": self.api_url},
                stripe_version=self.api_version,
                max_network_retries=self.max_network_retries,
            )
        return self._client

    async def _call(self, operation: str, method, params: Dict[str, Any]):
        try:
            return await method(params=_drop_none(params))
        except stripe.StripeError as exc:
            logger.error(
                "stripe_api_error",
                operation=operation,
                status=exc.http_status,
                code=exc.code,
                message=exc.user_message,
            )
            raise UpstreamFailure(
                exc.user_message or "Payment provider request failed",
                upstream_status=exc.http_status,
            ) from exc

    async def list_products(self, limit: int = 100) -> List[stripe.Product]:
        page = await self._call("list_products", self.client.v1.products.list_async, {"limit": limit})
        return list(page.data)

    async def create_product(self, name: str, description: Optional[str] = None) -> stripe.Product:
        return await self._call(
            "create_product",
            self.client.v1.products.create_async,
            {"name": name, "description": description},
        )

    async def list_prices(self, product_id: str, limit: int = 100) -> List[stripe.Price]:
        page = await self._call(
            "list_prices",
            self.client.v1.prices.list_async,
            {"product": product_id, "limit": limit},
        )
        return list(page.data)

    async def create_price(
        self,
        product_id: str,
        unit_amount: int,
        currency: str,
        recurring_interval: Optional[str] = None,
    ) -> stripe.Price:
        params: Dict[str, Any] = {
            "product": product_id,
            "unit_amount": unit_amount,
            "currency": currency,
        }
        if recurring_interval:
            params["recurring"] = {"interval": recurring_interval}
        return await self._call("create_price", self.client.v1.prices.create_async, params)

    async def create_checkout_session(self, **params: Any) -> "stripe.checkout.Session":
        return await self._call(
            "create_checkout_session",
            self.client.v1.checkout.sessions.create_async,
            params,
        )

    async def aclose(self) -> None:
        await self.http_client.close_async()
