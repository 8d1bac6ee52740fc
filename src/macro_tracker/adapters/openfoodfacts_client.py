"""Open Food Facts API client."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from macro_tracker.domain.lookup import (
    LookupFailed,
    ProductFound,
    ProductLookup,
    ProductMissing,
    ProductSearch,
    SearchHits,
)

_logger = logging.getLogger(__name__)

_PRODUCT_FOUND = 1


class FoodDatabaseClient(Protocol):
    """Interface for barcode and text lookups against a food database."""

    async def lookup_by_barcode(self, barcode: str) -> ProductLookup:
        """Look up a single product by barcode."""

    async def search_by_text(self, query: str, limit: int = 10) -> ProductSearch:
        """Search products by free text."""


@dataclass
class HttpxOpenFoodFactsClient(FoodDatabaseClient):
    """HTTPX-backed Open Food Facts client.

    Missing products and transport problems are reported as values so
    callers can fall through to another strategy.
    """

    base_url: str
    user_agent: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, user_agent: str, timeout_seconds: float = 10.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            user_agent=user_agent,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def lookup_by_barcode(self, barcode: str) -> ProductLookup:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/api/v2/product/{barcode}.json"
        try:
            response = await self.http_client.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            _logger.warning("Open Food Facts barcode %s failed: %s", barcode, exc)
            return LookupFailed(reason=str(exc) or type(exc).__name__)

        if not response.is_success:
            _logger.info(
                "Open Food Facts barcode %s returned status=%s",
                barcode,
                response.status_code,
            )
            return ProductMissing(reason=f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            _logger.warning("Open Food Facts barcode %s sent invalid JSON", barcode)
            return LookupFailed(reason=f"invalid JSON: {exc}")

        if not isinstance(payload, dict):
            return LookupFailed(reason="unexpected payload shape")
        product = payload.get("product")
        if payload.get("status") != _PRODUCT_FOUND or not isinstance(product, dict):
            return ProductMissing(
                reason=str(payload.get("status_verbose") or "product not found")
            )
        return ProductFound(product=product)

    async def search_by_text(self, query: str, limit: int = 10) -> ProductSearch:
        """Search products by name or free text."""
        url = f"{self.base_url}/cgi/search.pl"
        try:
            response = await self.http_client.get(
                url,
                params={"search_terms": query, "page_size": limit, "json": 1},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Open Food Facts search %r failed: %s", query, exc)
            return LookupFailed(reason=str(exc) or type(exc).__name__)

        products = payload.get("products") if isinstance(payload, dict) else None
        if not isinstance(products, list):
            return SearchHits(products=[])
        return SearchHits(
            products=[product for product in products if isinstance(product, dict)]
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
