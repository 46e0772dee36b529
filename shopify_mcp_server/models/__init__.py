"""Data models for JSON-RPC messages and MCP tools."""

from .jsonrpc import (
    RpcRequest,
    RpcResponse,
    RpcErrorResponse,
    RpcError,
    error_response,
    success_response,
)
from .tools import (
    ToolDescriptor,
    TextContent,
    ToolResult,
)

__all__ = [
    "RpcRequest",
    "RpcResponse",
    "RpcErrorResponse",
    "RpcError",
    "error_response",
    "success_response",
    "ToolDescriptor",
    "TextContent",
    "ToolResult",
]
