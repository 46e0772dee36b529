"""HTTP client for the Shopify Admin REST API."""

import logging
from typing import Any, Dict, Optional
import httpx

from .config import ShopifyConfig
from .errors import UpstreamError

logger = logging.getLogger("shopify_mcp_server.client")


class ShopifyClient:
    """
    Thin async client for Shopify's Admin REST API.

    Every call issues exactly one request. There is no caching, retrying or
    pagination; non-success statuses surface as UpstreamError.
    """

    def __init__(self, config: ShopifyConfig, client: Optional[Any] = None):
        """
        Initialize the client.

        Args:
            config: Upstream configuration
            client: Optional HTTP client (e.g., MockShopifyClient)
        """
        self.config = config

        if client is not None:
            self.client = client
            self._owns_client = False
        else:
            self.client = httpx.AsyncClient(timeout=config.timeout)
            self._owns_client = True

    async def close(self):
        """Close HTTP client."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.config.access_token or "",
        }

    def url_for(self, endpoint: str) -> str:
        """Absolute URL for an endpoint path such as ``orders.json?limit=10``."""
        return f"{self.config.base_url}/{endpoint.lstrip('/')}"

    async def call(self, endpoint: str, method: str = "GET", body: Optional[Any] = None) -> Any:
        """
        Make a single request to Shopify.

        Args:
            endpoint: API path relative to the versioned prefix, query string included
            method: HTTP method
            body: JSON payload, sent only for non-GET requests

        Returns:
            Parsed JSON response data
        """
        kwargs: Dict[str, Any] = {"headers": self._headers()}
        if body is not None and method != "GET":
            kwargs["json"] = body

        url = self.url_for(endpoint)
        logger.debug("shopify_request", extra={"method": method, "endpoint": endpoint})
        response = await self.client.request(method, url, **kwargs)

        if not response.is_success:
            logger.warning(
                "shopify_error",
                extra={"method": method, "endpoint": endpoint, "status_code": response.status_code},
            )
            raise UpstreamError(response.status_code, response.text)

        return response.json()
