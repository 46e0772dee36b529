"""Exception taxonomy for the Shopify MCP Server."""

from typing import Optional


class ShopifyMCPError(Exception):
    """Base class for errors raised by the server."""


class ProtocolError(ShopifyMCPError):
    """Raised when an inbound message is not a valid JSON-RPC 2.0 request."""

    code = -32600


class MethodNotFoundError(ShopifyMCPError):
    """Raised for an unknown top-level JSON-RPC method."""


class UnknownToolError(MethodNotFoundError):
    """Raised when tools/call names a tool that is not registered."""

    def __init__(self, tool_name: Optional[str]):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class ConfigurationError(ShopifyMCPError):
    """Raised when the server is missing required configuration."""


class ValidationError(ShopifyMCPError):
    """Raised when a required argument is missing or malformed."""


class UpstreamError(ShopifyMCPError):
    """Raised when Shopify answers with a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Shopify API Error: {status_code} - {body}")


class NotFoundError(ShopifyMCPError):
    """Raised when a resource required by a mutation does not exist."""
