"""
Shopify MCP Server

A JSON-RPC 2.0 (MCP) server exposing Shopify Admin REST API operations
as tools for a calling agent.
"""

__version__ = "1.0.0"

from .client import ShopifyClient
from .config import ServerSettings, ShopifyConfig
from .dispatcher import ToolDispatcher
from .mock_client import MockShopifyClient
from .protocol import JsonRpcHandler
from .router import create_app, get_mcp_router

__all__ = [
    "ShopifyClient",
    "ServerSettings",
    "ShopifyConfig",
    "ToolDispatcher",
    "MockShopifyClient",
    "JsonRpcHandler",
    "create_app",
    "get_mcp_router",
]
