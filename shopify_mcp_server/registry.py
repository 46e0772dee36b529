"""Static catalog of tools advertised through tools/list."""

from typing import Any, Dict, List, Optional, Tuple

from .models.tools import ToolDescriptor

DEFAULT_LIMIT = 10
MAX_LIMIT = 250


def _schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _string(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _limit(what: str) -> Dict[str, Any]:
    return {
        "type": "number",
        "description": f"Number of {what} to return, default {DEFAULT_LIMIT}, max {MAX_LIMIT}",
        "default": DEFAULT_LIMIT,
    }


_STOREFRONT_NOTE = " Requires the Storefront API, which this server does not support."

TOOLS: Tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="get_products",
        description="List products in the Shopify store. Can filter by title, tags, vendor and product type.",
        input_schema=_schema({
            "limit": _limit("products"),
            "title": _string("Filter by product title"),
            "vendor": _string("Filter by vendor"),
            "product_type": _string("Filter by product type"),
            "tags": _string("Filter by tags, comma separated"),
        }),
    ),
    ToolDescriptor(
        name="get_product_by_id",
        description="Get the full details of a single product by its ID.",
        input_schema=_schema({"product_id": _string("Shopify product ID")}, ["product_id"]),
    ),
    ToolDescriptor(
        name="search_products",
        description="Search products by keyword in title, description and tags. Only the first `limit` products are searched.",
        input_schema=_schema({
            "query": _string("Search keyword"),
            "limit": _limit("products to search"),
        }, ["query"]),
    ),
    ToolDescriptor(
        name="search_shop_policies_and_faqs",
        description="Answer questions about shop policies and FAQs." + _STOREFRONT_NOTE,
        input_schema=_schema({
            "query": _string("Question about the shop's policies, products or services"),
            "context": _string("Additional context about the current conversation"),
        }, ["query"]),
    ),
    ToolDescriptor(
        name="get_cart",
        description="Get the contents of a cart." + _STOREFRONT_NOTE,
        input_schema=_schema({"cart_id": _string("Cart ID")}, ["cart_id"]),
    ),
    ToolDescriptor(
        name="update_cart",
        description="Add, update or remove cart lines." + _STOREFRONT_NOTE,
        input_schema=_schema({
            "cart_id": _string("Cart ID"),
            "lines": {
                "type": "array",
                "description": "Cart lines to set",
                "items": {
                    "type": "object",
                    "properties": {
                        "merchandise_id": _string("Product variant ID"),
                        "quantity": {"type": "number", "description": "Quantity, 0 removes the line"},
                        "line_item_id": _string("Existing cart line ID"),
                    },
                },
            },
        }, ["cart_id", "lines"]),
    ),
    ToolDescriptor(
        name="get_collections",
        description="List product collections (custom collections by default, or smart collections).",
        input_schema=_schema({
            "limit": _limit("collections"),
            "title": _string("Filter by collection title"),
            "collection_type": {
                "type": "string",
                "enum": ["custom", "smart"],
                "description": "Collection type, default custom",
                "default": "custom",
            },
        }),
    ),
    ToolDescriptor(
        name="get_collection_by_id",
        description="Get a single collection by its ID.",
        input_schema=_schema({"collection_id": _string("Shopify collection ID")}, ["collection_id"]),
    ),
    ToolDescriptor(
        name="get_orders",
        description="List orders. Can filter by status, financial status, fulfillment status and creation date.",
        input_schema=_schema({
            "limit": _limit("orders"),
            "status": {
                "type": "string",
                "enum": ["open", "closed", "cancelled", "any"],
                "description": "Order status, default any",
                "default": "any",
            },
            "financial_status": _string("Financial status, e.g. paid, pending, refunded"),
            "fulfillment_status": _string("Fulfillment status, e.g. shipped, partial, unshipped"),
            "created_at_min": _string("Only orders created at or after this ISO 8601 date"),
            "created_at_max": _string("Only orders created at or before this ISO 8601 date"),
        }),
    ),
    ToolDescriptor(
        name="get_order_by_id",
        description="Get the full details of a single order by its ID.",
        input_schema=_schema({"order_id": _string("Shopify order ID")}, ["order_id"]),
    ),
    ToolDescriptor(
        name="get_customers",
        description="List customers.",
        input_schema=_schema({
            "limit": _limit("customers"),
            "created_at_min": _string("Only customers created at or after this ISO 8601 date"),
            "updated_at_min": _string("Only customers updated at or after this ISO 8601 date"),
        }),
    ),
    ToolDescriptor(
        name="get_customer_by_id",
        description="Get a single customer by ID.",
        input_schema=_schema({"customer_id": _string("Shopify customer ID")}, ["customer_id"]),
    ),
    ToolDescriptor(
        name="get_shop_info",
        description="Get basic information about the shop: name, domain, currency, contact details.",
        input_schema=_schema({}),
    ),
    ToolDescriptor(
        name="get_inventory_items",
        description="List inventory items, optionally restricted to specific IDs.",
        input_schema=_schema({
            "ids": _string("Comma separated inventory item IDs"),
            "limit": _limit("inventory items"),
        }),
    ),
    ToolDescriptor(
        name="get_inventory_item_by_id",
        description="Get a single inventory item by ID.",
        input_schema=_schema({"inventory_item_id": _string("Shopify inventory item ID")}, ["inventory_item_id"]),
    ),
    ToolDescriptor(
        name="get_locations",
        description="List the store's locations (warehouses, retail stores).",
        input_schema=_schema({}),
    ),
    ToolDescriptor(
        name="get_inventory_levels",
        description="Get inventory levels, filtered by location and/or inventory item.",
        input_schema=_schema({
            "location_ids": _string("Comma separated location IDs"),
            "inventory_item_ids": _string("Comma separated inventory item IDs"),
            "limit": _limit("inventory levels"),
        }),
    ),
    ToolDescriptor(
        name="get_product_variants",
        description="List the variants of a product.",
        input_schema=_schema({
            "product_id": _string("Shopify product ID"),
            "limit": _limit("variants"),
        }, ["product_id"]),
    ),
    ToolDescriptor(
        name="get_fulfillments",
        description="List the fulfillments of an order.",
        input_schema=_schema({
            "order_id": _string("Shopify order ID"),
            "limit": _limit("fulfillments"),
        }, ["order_id"]),
    ),
    ToolDescriptor(
        name="create_fulfillment",
        description="Fulfill every line item of an order from a location, with optional tracking information.",
        input_schema=_schema({
            "order_id": _string("Shopify order ID"),
            "location_id": _string("Location the items ship from"),
            "tracking_number": _string("Carrier tracking number"),
            "tracking_company": _string("Carrier name"),
            "tracking_url": _string("Tracking URL"),
            "notify_customer": {"type": "boolean", "description": "Email the customer about the shipment"},
        }, ["order_id", "location_id"]),
    ),
    ToolDescriptor(
        name="get_refunds",
        description="List the refunds of an order.",
        input_schema=_schema({
            "order_id": _string("Shopify order ID"),
            "limit": _limit("refunds"),
        }, ["order_id"]),
    ),
    ToolDescriptor(
        name="create_refund",
        description="Refund an order. All line items are attached to the refund; an optional amount adds a refund transaction.",
        input_schema=_schema({
            "order_id": _string("Shopify order ID"),
            "amount": _string("Amount to refund, e.g. \"10.00\""),
            "note": _string("Reason for the refund"),
            "notify": {"type": "boolean", "description": "Email the customer about the refund"},
            "restock": {"type": "boolean", "description": "Return the refunded items to stock"},
        }, ["order_id"]),
    ),
    ToolDescriptor(
        name="cancel_order",
        description="Cancel an order.",
        input_schema=_schema({
            "order_id": _string("Shopify order ID"),
            "cancel_reason": {
                "type": "string",
                "enum": ["customer", "fraud", "inventory", "declined", "other"],
                "description": "Cancellation reason, default other",
                "default": "other",
            },
            "email": {"type": "boolean", "description": "Email the customer about the cancellation", "default": False},
            "restock": {"type": "boolean", "description": "Return the items to stock"},
        }, ["order_id"]),
    ),
    ToolDescriptor(
        name="get_customer_metafields",
        description="List the metafields of a customer.",
        input_schema=_schema({"customer_id": _string("Shopify customer ID")}, ["customer_id"]),
    ),
    ToolDescriptor(
        name="get_product_metafields",
        description="List the metafields of a product.",
        input_schema=_schema({"product_id": _string("Shopify product ID")}, ["product_id"]),
    ),
    ToolDescriptor(
        name="get_draft_orders",
        description="List draft orders.",
        input_schema=_schema({
            "limit": _limit("draft orders"),
            "status": {
                "type": "string",
                "enum": ["open", "invoice_sent", "completed"],
                "description": "Filter by draft order status",
            },
        }),
    ),
    ToolDescriptor(
        name="get_draft_order_by_id",
        description="Get a single draft order by ID.",
        input_schema=_schema({"draft_order_id": _string("Shopify draft order ID")}, ["draft_order_id"]),
    ),
    ToolDescriptor(
        name="get_price_rules",
        description="List price rules (the basis of discounts).",
        input_schema=_schema({"limit": _limit("price rules")}),
    ),
    ToolDescriptor(
        name="get_discount_codes",
        description="List the discount codes of a price rule. Use get_price_rules first to find the price rule ID.",
        input_schema=_schema({"price_rule_id": _string("Shopify price rule ID")}),
    ),
    ToolDescriptor(
        name="get_returns",
        description="List returns, optionally for one order. Falls back to guidance when the store does not expose returns.",
        input_schema=_schema({
            "order_id": _string("Shopify order ID"),
            "limit": _limit("returns"),
        }),
    ),
)

_BY_NAME: Dict[str, ToolDescriptor] = {tool.name: tool for tool in TOOLS}


def list_tools() -> Tuple[ToolDescriptor, ...]:
    """Return the catalog in declaration order."""
    return TOOLS


def tool_names() -> List[str]:
    return [tool.name for tool in TOOLS]


def get_tool(name: str) -> Optional[ToolDescriptor]:
    return _BY_NAME.get(name)
