"""Mock Shopify client for sandbox mode."""

import json
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl, urlsplit


class MockResponse:
    """Minimal response object compatible with ShopifyClient usage."""

    def __init__(self, data: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None):
        self._data = data
        self.status_code = status_code
        self.headers = headers or {}

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        if isinstance(self._data, str):
            return self._data
        return json.dumps(self._data)

    def json(self) -> Any:
        return self._data


def sandbox_routes() -> Dict[str, Any]:
    """Sample data served by the sandbox when no routes are given."""
    order = {
        "id": 1001,
        "name": "#1001",
        "email": "customer@example.com",
        "financial_status": "paid",
        "fulfillment_status": None,
        "line_items": [
            {"id": 501, "title": "Mock T-Shirt", "quantity": 2, "price": "29.99"},
        ],
    }
    return {
        "GET shop.json": {
            "shop": {"id": 1, "name": "Mock Store", "domain": "mock-store.myshopify.com", "currency": "USD"}
        },
        "GET products.json": {
            "products": [
                {
                    "id": 123,
                    "title": "Mock T-Shirt",
                    "body_html": "<p>Soft cotton t-shirt</p>",
                    "vendor": "MockBrand",
                    "product_type": "Apparel",
                    "tags": "cotton, summer",
                }
            ]
        },
        "GET orders.json": {"orders": [order]},
        "GET orders/1001.json": {"order": order},
        "GET locations.json": {"locations": [{"id": 77, "name": "Main Warehouse"}]},
    }


class MockShopifyClient:
    """
    Mock Shopify client that serves canned responses.

    Routes are keyed by ``"<METHOD> <endpoint>"`` where the endpoint is the
    path after the versioned API prefix, without the query string. A route
    value is the JSON body to return, a MockResponse, or a callable taking the
    parsed query parameters and returning either. Unknown routes answer 404.
    Every request is recorded in ``calls``.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes = routes if routes is not None else sandbox_routes()
        self.calls: List[Dict[str, Any]] = []

    @staticmethod
    def _split(url: str):
        parts = urlsplit(url)
        path = parts.path
        if "/admin/api/" in path:
            path = path.split("/admin/api/", 1)[1]
            path = path.split("/", 1)[1] if "/" in path else ""
        return path.lstrip("/"), dict(parse_qsl(parts.query))

    async def request(self, method: str, url: str, **kwargs) -> MockResponse:
        endpoint, query = self._split(url)
        self.calls.append(
            {
                "method": method,
                "url": url,
                "endpoint": endpoint,
                "query": query,
                "json": kwargs.get("json"),
                "headers": kwargs.get("headers") or {},
            }
        )
        route = self.routes.get(f"{method} {endpoint}")
        if route is None:
            return MockResponse({"errors": "Not Found"}, status_code=404)
        if callable(route):
            route = route(query)
        if isinstance(route, MockResponse):
            return route
        return MockResponse(route)

    def calls_for(self, method: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method]

    async def aclose(self) -> None:
        return None
