import json

import httpx
import pytest

from shopify_mcp_server.config import ServerSettings
from shopify_mcp_server.mock_client import MockShopifyClient
from shopify_mcp_server.router import create_app


def make_settings(token="shpat_test"):
    return ServerSettings(
        _env_file=None,
        store="mystore.myshopify.com",
        access_token=token,
    )


def make_client(app):
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.asyncio
async def test_health_reports_store_and_token():
    app = create_app(make_settings(), client=MockShopifyClient({}))
    async with make_client(app) as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "service": "shopify-mcp-server",
        "store": "mystore.myshopify.com",
        "token_configured": True,
    }


@pytest.mark.asyncio
async def test_health_without_token():
    app = create_app(make_settings(token=None), client=MockShopifyClient({}))
    async with make_client(app) as client:
        response = await client.get("/health")
    assert response.json()["token_configured"] is False


@pytest.mark.asyncio
async def test_tools_call_over_http():
    mock = MockShopifyClient({"GET shop.json": {"shop": {"name": "My Store"}}})
    app = create_app(make_settings(), client=mock)

    async with make_client(app) as client:
        response = await client.post("/", json={
            "jsonrpc": "2.0",
            "id": 1,
            "method": "tools/call",
            "params": {"name": "get_shop_info", "arguments": {}},
        })

    assert response.status_code == 200
    body = response.json()
    assert body["jsonrpc"] == "2.0"
    assert body["id"] == 1
    assert json.loads(body["result"]["content"][0]["text"]) == {"name": "My Store"}


@pytest.mark.asyncio
async def test_notification_has_empty_body():
    app = create_app(make_settings(), client=MockShopifyClient({}))
    async with make_client(app) as client:
        ok = await client.post("/", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
        failed = await client.post("/", json={
            "jsonrpc": "2.0",
            "method": "tools/call",
            "params": {"name": "get_shop_info"},
        })

    assert ok.status_code == 204
    assert ok.content == b""
    assert failed.status_code == 204
    assert failed.content == b""


@pytest.mark.asyncio
async def test_malformed_json_is_parse_error():
    app = create_app(make_settings(), client=MockShopifyClient({}))
    async with make_client(app) as client:
        response = await client.post(
            "/", content=b"{not json", headers={"Content-Type": "application/json"}
        )

    assert response.status_code == 200
    assert response.json() == {
        "jsonrpc": "2.0",
        "error": {"code": -32700, "message": "Parse error", "data": None},
        "id": None,
    }


@pytest.mark.asyncio
async def test_batch_is_rejected():
    app = create_app(make_settings(), client=MockShopifyClient({}))
    async with make_client(app) as client:
        response = await client.post("/", json=[{"jsonrpc": "2.0", "id": 1, "method": "tools/list"}])
    assert response.json()["error"]["code"] == -32600


@pytest.mark.asyncio
async def test_invalid_version_over_http():
    app = create_app(make_settings(), client=MockShopifyClient({}))
    async with make_client(app) as client:
        response = await client.post("/", json={"jsonrpc": "1.0", "id": 5, "method": "tools/list"})
    assert response.json()["error"]["code"] == -32600
    assert response.json()["id"] == 5
