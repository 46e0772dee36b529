"""Tool handlers that translate tool calls into Shopify Admin REST requests."""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional
from urllib.parse import quote

from .client import ShopifyClient
from .errors import (
    ConfigurationError,
    NotFoundError,
    UnknownToolError,
    UpstreamError,
    ValidationError,
)
from .models.tools import ToolResult
from .registry import DEFAULT_LIMIT, MAX_LIMIT

logger = logging.getLogger("shopify_mcp_server.dispatcher")

Handler = Callable[[Dict[str, Any]], Awaitable[Any]]

SEARCH_FIELDS = ("title", "body_html", "tags")

STOREFRONT_MESSAGE = (
    "This operation requires the Shopify Storefront API (GraphQL) and a Storefront "
    "access token, which this server does not support. Only the Admin REST API is available."
)


def clamp_limit(value: Any) -> int:
    """Apply the default page size and cap it at Shopify's maximum."""
    if value is None or value == "":
        return DEFAULT_LIMIT
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"limit must be a number, got {value!r}")
    return min(limit, MAX_LIMIT)


def build_endpoint(path: str, **params: Any) -> str:
    """
    Append percent-encoded query parameters to an endpoint path.

    Parameters that are None or empty strings are left out entirely.
    """
    query = "&".join(
        f"{key}={quote(str(value), safe='')}"
        for key, value in params.items()
        if value is not None and value != ""
    )
    return f"{path}?{query}" if query else path


def require(args: Mapping[str, Any], key: str) -> Any:
    value = args.get(key)
    if value is None or value == "":
        raise ValidationError(f"{key} is required")
    return value


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _matches(product: Dict[str, Any], needle: str) -> bool:
    return any(needle in str(product.get(field) or "").lower() for field in SEARCH_FIELDS)


class ToolDispatcher:
    """
    Route tool calls to their handlers.

    Handlers return the raw payload extracted from Shopify's response;
    ``invoke`` wraps it into the uniform text-content envelope.
    """

    def __init__(self, client: ShopifyClient):
        self.client = client
        self.config = client.config
        self._handlers: Dict[str, Handler] = {
            "get_products": self.get_products,
            "get_product_by_id": self.get_product_by_id,
            "search_products": self.search_products,
            "search_shop_policies_and_faqs": self.search_shop_policies_and_faqs,
            "get_cart": self.get_cart,
            "update_cart": self.update_cart,
            "get_collections": self.get_collections,
            "get_collection_by_id": self.get_collection_by_id,
            "get_orders": self.get_orders,
            "get_order_by_id": self.get_order_by_id,
            "get_customers": self.get_customers,
            "get_customer_by_id": self.get_customer_by_id,
            "get_shop_info": self.get_shop_info,
            "get_inventory_items": self.get_inventory_items,
            "get_inventory_item_by_id": self.get_inventory_item_by_id,
            "get_locations": self.get_locations,
            "get_inventory_levels": self.get_inventory_levels,
            "get_product_variants": self.get_product_variants,
            "get_fulfillments": self.get_fulfillments,
            "create_fulfillment": self.create_fulfillment,
            "get_refunds": self.get_refunds,
            "create_refund": self.create_refund,
            "cancel_order": self.cancel_order,
            "get_customer_metafields": self.get_customer_metafields,
            "get_product_metafields": self.get_product_metafields,
            "get_draft_orders": self.get_draft_orders,
            "get_draft_order_by_id": self.get_draft_order_by_id,
            "get_price_rules": self.get_price_rules,
            "get_discount_codes": self.get_discount_codes,
            "get_returns": self.get_returns,
        }

    @property
    def handler_names(self) -> List[str]:
        return list(self._handlers)

    async def invoke(self, tool_name: Optional[str], args: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """
        Run a tool and wrap its payload.

        Raises:
            ConfigurationError: no access token is configured
            UnknownToolError: the tool is not registered
        """
        if not self.config.token_configured:
            raise ConfigurationError("Shopify access token is not configured")

        handler = self._handlers.get(tool_name) if tool_name else None
        if handler is None:
            raise UnknownToolError(tool_name)

        if args is None:
            args = {}
        if not isinstance(args, Mapping):
            raise ValidationError("Tool arguments must be an object")

        logger.info("tool_call", extra={"tool": tool_name})
        payload = await handler(dict(args))
        return ToolResult.from_payload(payload)

    async def _fetch_list(self, endpoint: str, field: str) -> List[Any]:
        data = await self.client.call(endpoint)
        return data.get(field) or []

    async def _fetch_one(self, endpoint: str, field: str) -> Dict[str, Any]:
        data = await self.client.call(endpoint)
        return data.get(field) or {}

    async def _fetch_order(self, order_id: Any) -> Dict[str, Any]:
        try:
            data = await self.client.call(f"orders/{_segment(order_id)}.json")
        except UpstreamError as exc:
            if exc.status_code == 404:
                raise NotFoundError(f"Order {order_id} not found") from exc
            raise
        order = data.get("order")
        if not order:
            raise NotFoundError(f"Order {order_id} not found")
        return order

    # Products

    async def get_products(self, args: Dict[str, Any]) -> List[Any]:
        endpoint = build_endpoint(
            "products.json",
            limit=clamp_limit(args.get("limit")),
            title=args.get("title"),
            vendor=args.get("vendor"),
            product_type=args.get("product_type"),
            tags=args.get("tags"),
        )
        return await self._fetch_list(endpoint, "products")

    async def get_product_by_id(self, args: Dict[str, Any]) -> Dict[str, Any]:
        product_id = require(args, "product_id")
        return await self._fetch_one(f"products/{_segment(product_id)}.json", "product")

    async def search_products(self, args: Dict[str, Any]) -> List[Any]:
        """
        Keyword search over a single page of products.

        Only the first ``limit`` products Shopify returns are inspected, so a
        match outside that window is never found.
        """
        query = require(args, "query")
        limit = clamp_limit(args.get("limit"))
        products = await self._fetch_list(build_endpoint("products.json", limit=limit), "products")
        needle = str(query).lower()
        return [product for product in products if _matches(product, needle)]

    async def get_product_variants(self, args: Dict[str, Any]) -> List[Any]:
        product_id = require(args, "product_id")
        endpoint = build_endpoint(
            f"products/{_segment(product_id)}/variants.json",
            limit=clamp_limit(args.get("limit")),
        )
        return await self._fetch_list(endpoint, "variants")

    async def get_product_metafields(self, args: Dict[str, Any]) -> List[Any]:
        product_id = require(args, "product_id")
        return await self._fetch_list(f"products/{_segment(product_id)}/metafields.json", "metafields")

    # Storefront-only operations

    async def search_shop_policies_and_faqs(self, args: Dict[str, Any]) -> Dict[str, Any]:
        query = require(args, "query")
        return {
            "query": query,
            "message": STOREFRONT_MESSAGE,
            "suggestion": "Use get_shop_info for general shop details.",
        }

    async def get_cart(self, args: Dict[str, Any]) -> Dict[str, Any]:
        cart_id = require(args, "cart_id")
        return {"cart_id": cart_id, "message": STOREFRONT_MESSAGE}

    async def update_cart(self, args: Dict[str, Any]) -> Dict[str, Any]:
        cart_id = require(args, "cart_id")
        return {"cart_id": cart_id, "lines": args.get("lines") or [], "message": STOREFRONT_MESSAGE}

    # Collections

    async def get_collections(self, args: Dict[str, Any]) -> List[Any]:
        collection_type = args.get("collection_type") or "custom"
        if collection_type not in ("custom", "smart"):
            raise ValidationError(f"collection_type must be 'custom' or 'smart', got {collection_type!r}")
        resource = f"{collection_type}_collections"
        endpoint = build_endpoint(
            f"{resource}.json",
            limit=clamp_limit(args.get("limit")),
            title=args.get("title"),
        )
        return await self._fetch_list(endpoint, resource)

    async def get_collection_by_id(self, args: Dict[str, Any]) -> Dict[str, Any]:
        collection_id = require(args, "collection_id")
        return await self._fetch_one(f"collections/{_segment(collection_id)}.json", "collection")

    # Orders

    async def get_orders(self, args: Dict[str, Any]) -> List[Any]:
        endpoint = build_endpoint(
            "orders.json",
            limit=clamp_limit(args.get("limit")),
            status=args.get("status") or "any",
            financial_status=args.get("financial_status"),
            fulfillment_status=args.get("fulfillment_status"),
            created_at_min=args.get("created_at_min"),
            created_at_max=args.get("created_at_max"),
        )
        return await self._fetch_list(endpoint, "orders")

    async def get_order_by_id(self, args: Dict[str, Any]) -> Dict[str, Any]:
        order_id = require(args, "order_id")
        return await self._fetch_one(f"orders/{_segment(order_id)}.json", "order")

    async def cancel_order(self, args: Dict[str, Any]) -> Dict[str, Any]:
        order_id = require(args, "order_id")
        body: Dict[str, Any] = {"reason": args.get("cancel_reason") or args.get("reason") or "other"}
        if args.get("email"):
            body["email"] = True
        if args.get("restock"):
            body["restock"] = True
        data = await self.client.call(f"orders/{_segment(order_id)}/cancel.json", "POST", body)
        return data.get("order") or {}

    async def get_draft_orders(self, args: Dict[str, Any]) -> List[Any]:
        endpoint = build_endpoint(
            "draft_orders.json",
            limit=clamp_limit(args.get("limit")),
            status=args.get("status"),
        )
        return await self._fetch_list(endpoint, "draft_orders")

    async def get_draft_order_by_id(self, args: Dict[str, Any]) -> Dict[str, Any]:
        draft_order_id = require(args, "draft_order_id")
        return await self._fetch_one(f"draft_orders/{_segment(draft_order_id)}.json", "draft_order")

    # Fulfillments and refunds

    async def get_fulfillments(self, args: Dict[str, Any]) -> List[Any]:
        order_id = require(args, "order_id")
        endpoint = build_endpoint(
            f"orders/{_segment(order_id)}/fulfillments.json",
            limit=clamp_limit(args.get("limit")),
        )
        return await self._fetch_list(endpoint, "fulfillments")

    async def create_fulfillment(self, args: Dict[str, Any]) -> Dict[str, Any]:
        """
        Fulfill every line item of an order.

        Two requests: the order is fetched for its line items, then the
        fulfillment is posted. Not idempotent; a repeated call can create a
        second fulfillment.
        """
        order_id = require(args, "order_id")
        location_id = require(args, "location_id")
        order = await self._fetch_order(order_id)

        fulfillment: Dict[str, Any] = {
            "location_id": location_id,
            "line_items": [
                {"id": item.get("id"), "quantity": item.get("quantity")}
                for item in order.get("line_items") or []
            ],
        }
        for key in ("tracking_number", "tracking_company", "tracking_url"):
            if args.get(key):
                fulfillment[key] = args[key]
        if args.get("notify_customer") is not None:
            fulfillment["notify_customer"] = bool(args["notify_customer"])

        data = await self.client.call(
            f"orders/{_segment(order_id)}/fulfillments.json", "POST", {"fulfillment": fulfillment}
        )
        return data.get("fulfillment") or {}

    async def get_refunds(self, args: Dict[str, Any]) -> List[Any]:
        order_id = require(args, "order_id")
        endpoint = build_endpoint(
            f"orders/{_segment(order_id)}/refunds.json",
            limit=clamp_limit(args.get("limit")),
        )
        return await self._fetch_list(endpoint, "refunds")

    async def create_refund(self, args: Dict[str, Any]) -> Dict[str, Any]:
        """
        Refund an order.

        Every line item of the order is attached as a refund line item, even
        when an explicit ``amount`` is given. Not idempotent.
        """
        order_id = require(args, "order_id")
        order = await self._fetch_order(order_id)
        restock = bool(args.get("restock"))

        line_items = []
        for item in order.get("line_items") or []:
            entry = {"line_item_id": item.get("id"), "quantity": item.get("quantity")}
            if restock:
                entry["restock_type"] = "return"
            line_items.append(entry)

        refund: Dict[str, Any] = {"refund_line_items": line_items}
        if args.get("note"):
            refund["note"] = args["note"]
        if args.get("notify") is not None:
            refund["notify"] = bool(args["notify"])
        amount = args.get("amount")
        if amount is not None and amount != "":
            refund["transactions"] = [{"kind": "refund", "amount": amount}]

        data = await self.client.call(
            f"orders/{_segment(order_id)}/refunds.json", "POST", {"refund": refund}
        )
        return data.get("refund") or {}

    async def get_returns(self, args: Dict[str, Any]) -> Any:
        endpoint = build_endpoint(
            "returns.json",
            limit=clamp_limit(args.get("limit")),
            order_id=args.get("order_id"),
        )
        try:
            return await self._fetch_list(endpoint, "returns")
        except Exception as exc:
            logger.info("returns_unavailable", extra={"error": str(exc)})
            return {
                "message": (
                    "Returns could not be retrieved through the Admin REST API. "
                    "Shopify manages returns through the GraphQL Admin API."
                ),
                "error": str(exc),
                "suggestion": "Use get_refunds with an order_id to see what has been refunded.",
            }

    # Customers

    async def get_customers(self, args: Dict[str, Any]) -> List[Any]:
        endpoint = build_endpoint(
            "customers.json",
            limit=clamp_limit(args.get("limit")),
            created_at_min=args.get("created_at_min"),
            updated_at_min=args.get("updated_at_min"),
        )
        return await self._fetch_list(endpoint, "customers")

    async def get_customer_by_id(self, args: Dict[str, Any]) -> Dict[str, Any]:
        customer_id = require(args, "customer_id")
        return await self._fetch_one(f"customers/{_segment(customer_id)}.json", "customer")

    async def get_customer_metafields(self, args: Dict[str, Any]) -> List[Any]:
        customer_id = require(args, "customer_id")
        return await self._fetch_list(f"customers/{_segment(customer_id)}/metafields.json", "metafields")

    # Shop, locations and inventory

    async def get_shop_info(self, args: Dict[str, Any]) -> Dict[str, Any]:
        return await self._fetch_one("shop.json", "shop")

    async def get_locations(self, args: Dict[str, Any]) -> List[Any]:
        return await self._fetch_list("locations.json", "locations")

    async def get_inventory_items(self, args: Dict[str, Any]) -> List[Any]:
        endpoint = build_endpoint(
            "inventory_items.json",
            ids=args.get("ids"),
            limit=clamp_limit(args.get("limit")),
        )
        return await self._fetch_list(endpoint, "inventory_items")

    async def get_inventory_item_by_id(self, args: Dict[str, Any]) -> Dict[str, Any]:
        inventory_item_id = require(args, "inventory_item_id")
        return await self._fetch_one(f"inventory_items/{_segment(inventory_item_id)}.json", "inventory_item")

    async def get_inventory_levels(self, args: Dict[str, Any]) -> List[Any]:
        endpoint = build_endpoint(
            "inventory_levels.json",
            location_ids=args.get("location_ids"),
            inventory_item_ids=args.get("inventory_item_ids"),
            limit=clamp_limit(args.get("limit")),
        )
        return await self._fetch_list(endpoint, "inventory_levels")

    # Discounts

    async def get_price_rules(self, args: Dict[str, Any]) -> List[Any]:
        endpoint = build_endpoint("price_rules.json", limit=clamp_limit(args.get("limit")))
        return await self._fetch_list(endpoint, "price_rules")

    async def get_discount_codes(self, args: Dict[str, Any]) -> Any:
        price_rule_id = args.get("price_rule_id")
        if not price_rule_id:
            return {
                "message": (
                    "Shopify has no endpoint that lists every discount code. "
                    "Discount codes belong to a price rule."
                ),
                "suggestion": "Call get_price_rules, then call get_discount_codes with a price_rule_id.",
            }
        return await self._fetch_list(
            f"price_rules/{_segment(price_rule_id)}/discount_codes.json", "discount_codes"
        )
