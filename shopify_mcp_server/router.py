"""FastAPI router and application factory for the MCP endpoint."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional
from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .client import ShopifyClient
from .config import ServerSettings
from .dispatcher import ToolDispatcher
from .models.jsonrpc import PARSE_ERROR, error_response
from .protocol import JsonRpcHandler, SERVER_NAME
from .telemetry import get_tool_call_histogram

logger = logging.getLogger("shopify_mcp_server")


def get_mcp_router(handler: JsonRpcHandler, client: ShopifyClient) -> APIRouter:
    """
    Create a FastAPI router for the MCP endpoints.

    Args:
        handler: JSON-RPC handler serving ``POST /``
        client: Shopify client, used for the health report

    Returns:
        APIRouter with ``POST /`` and ``GET /health``
    """
    router = APIRouter(tags=["mcp"])

    @router.post("/")
    async def rpc(request: Request):
        """Handle a single JSON-RPC 2.0 message."""
        body = await request.body()
        try:
            message = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse(error_response(None, PARSE_ERROR, "Parse error"))

        response = await handler.handle(message)
        if response is None:
            return Response(status_code=204)
        return JSONResponse(response)

    @router.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "service": SERVER_NAME,
            "store": client.config.store,
            "token_configured": client.config.token_configured,
        }

    return router


def create_app(settings: Optional[ServerSettings] = None, client: Optional[Any] = None) -> FastAPI:
    """
    Build the MCP server application.

    Args:
        settings: Server settings (loaded from the environment if omitted)
        client: Optional HTTP client for Shopify (e.g., MockShopifyClient)

    Returns:
        FastAPI app ready to run

    Example:
        app = create_app()

        # Run with uvicorn:
        # uvicorn shopify_mcp_server.asgi:app --port 3000
    """
    settings = settings or ServerSettings()
    shopify = ShopifyClient(settings.shopify_config(), client=client)
    handler = JsonRpcHandler(
        ToolDispatcher(shopify),
        duration_histogram=get_tool_call_histogram(settings.metrics_console),
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info(
            "server_started",
            extra={"store": settings.store, "token_configured": shopify.config.token_configured},
        )
        if not shopify.config.token_configured:
            logger.warning("Shopify access token is NOT CONFIGURED; tool calls will fail")
        yield
        await shopify.close()

    app = FastAPI(title="Shopify MCP Server", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(get_mcp_router(handler, shopify))
    app.state.shopify = shopify
    app.state.handler = handler
    return app
