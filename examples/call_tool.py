"""Example: call a tool directly, without the HTTP layer."""

import asyncio
import json
from shopify_mcp_server import ShopifyClient, ShopifyConfig, ToolDispatcher


async def main():
    config = ShopifyConfig(
        store="mystore.myshopify.com",
        access_token="shpat_xxxxx",
    )

    async with ShopifyClient(config) as client:
        dispatcher = ToolDispatcher(client)

        result = await dispatcher.invoke("get_orders", {"limit": 5, "financial_status": "paid"})
        orders = json.loads(result.content[0].text)
        print(f"Fetched {len(orders)} paid orders")

        for order in orders:
            print(f"- {order.get('name')}: {order.get('total_price')} {order.get('currency')}")


if __name__ == "__main__":
    asyncio.run(main())
