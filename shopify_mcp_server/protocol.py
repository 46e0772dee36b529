"""JSON-RPC 2.0 envelope for the MCP methods."""

import logging
from time import perf_counter
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from . import __version__
from .dispatcher import ToolDispatcher
from .errors import MethodNotFoundError, ShopifyMCPError, ValidationError
from .models.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    RpcRequest,
    error_response,
    success_response,
)
from .registry import list_tools

logger = logging.getLogger("shopify_mcp_server.protocol")

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "shopify-mcp-server"


class JsonRpcHandler:
    """
    Handle one JSON-RPC message at a time.

    There is no state between messages. ``handle`` returns the response
    object, or None when nothing must be sent back (notifications).
    """

    def __init__(self, dispatcher: ToolDispatcher, duration_histogram: Optional[Any] = None):
        self.dispatcher = dispatcher
        self.duration_histogram = duration_histogram

    async def handle(self, message: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(message, dict):
            return error_response(None, INVALID_REQUEST, "Invalid Request")

        raw_id = message.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, (str, int)):
            raw_id = None
        if message.get("jsonrpc") != "2.0":
            return error_response(raw_id, INVALID_REQUEST, "Invalid Request")

        try:
            request = RpcRequest.model_validate(message)
        except PydanticValidationError:
            if message.get("id") is None:
                logger.warning("notification_failed", extra={"error": "Invalid Request"})
                return None
            return error_response(raw_id, INVALID_REQUEST, "Invalid Request")

        try:
            if request.method == "notifications/initialized":
                return None
            result = await self._route(request)
        except Exception as exc:
            if request.is_notification:
                logger.warning(
                    "notification_failed",
                    extra={"method": request.method, "error": str(exc)},
                )
                return None
            log = logger.warning if isinstance(exc, ShopifyMCPError) else logger.error
            log(
                "request_failed",
                extra={"method": request.method, "error": str(exc), "error_type": type(exc).__name__},
            )
            return error_response(request.id, INTERNAL_ERROR, "Internal error", str(exc))

        if request.is_notification:
            return None
        return success_response(request.id, result)

    async def _route(self, request: RpcRequest) -> Any:
        method = request.method
        if method == "initialize":
            return self.server_info()
        if method == "tools/list":
            return {"tools": [tool.to_wire() for tool in list_tools()]}
        if method == "tools/call":
            return await self._call_tool(request.params or {})
        raise MethodNotFoundError(f"Unknown method: {method}")

    async def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not name:
            raise ValidationError("Tool name is required")

        start = perf_counter()
        outcome = "error"
        try:
            result = await self.dispatcher.invoke(name, params.get("arguments") or {})
            outcome = "ok"
        finally:
            duration_ms = (perf_counter() - start) * 1000
            if self.duration_histogram is not None:
                self.duration_histogram.record(duration_ms, attributes={"tool": str(name), "outcome": outcome})
            logger.info("tool_call_finished", extra={"tool": name, "outcome": outcome, "duration_ms": duration_ms})
        return result.to_wire()

    @staticmethod
    def server_info() -> Dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }
