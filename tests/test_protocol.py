import json
import logging

import pytest

from shopify_mcp_server.client import ShopifyClient
from shopify_mcp_server.config import ShopifyConfig
from shopify_mcp_server.dispatcher import ToolDispatcher
from shopify_mcp_server.mock_client import MockShopifyClient
from shopify_mcp_server.protocol import JsonRpcHandler
from shopify_mcp_server.registry import tool_names


class RecordingHistogram:
    def __init__(self):
        self.records = []

    def record(self, value, attributes=None):
        self.records.append((value, attributes))


def make_handler(routes=None, token="shpat_test", histogram=None):
    mock = MockShopifyClient(routes if routes is not None else {})
    config = ShopifyConfig(store="mystore.myshopify.com", access_token=token)
    dispatcher = ToolDispatcher(ShopifyClient(config, client=mock))
    return JsonRpcHandler(dispatcher, duration_histogram=histogram), mock


def rpc(method, id=1, params=None):
    message = {"jsonrpc": "2.0", "method": method, "id": id}
    if params is not None:
        message["params"] = params
    return message


@pytest.mark.asyncio
async def test_initialize():
    handler, _ = make_handler()
    response = await handler.handle(rpc("initialize", params={"protocolVersion": "2024-11-05"}))
    assert response["jsonrpc"] == "2.0"
    assert response["id"] == 1
    assert response["result"]["protocolVersion"] == "2024-11-05"
    assert response["result"]["capabilities"] == {"tools": {}}
    assert response["result"]["serverInfo"]["name"] == "shopify-mcp-server"


@pytest.mark.asyncio
@pytest.mark.parametrize("version", ["1.0", None, 2.0])
async def test_wrong_jsonrpc_version_is_invalid_request(version):
    handler, _ = make_handler()
    message = {"method": "tools/list", "id": "abc"}
    if version is not None:
        message["jsonrpc"] = version

    response = await handler.handle(message)

    assert response == {
        "jsonrpc": "2.0",
        "error": {"code": -32600, "message": "Invalid Request", "data": None},
        "id": "abc",
    }


@pytest.mark.asyncio
async def test_invalid_request_without_id_echoes_null():
    handler, _ = make_handler()
    response = await handler.handle({"jsonrpc": "1.0", "method": "tools/list"})
    assert response["error"]["code"] == -32600
    assert response["id"] is None


@pytest.mark.asyncio
async def test_non_object_message_is_invalid_request():
    handler, _ = make_handler()
    response = await handler.handle([rpc("tools/list")])
    assert response["error"]["code"] == -32600
    assert response["id"] is None


@pytest.mark.asyncio
async def test_tools_list_is_stable_and_complete():
    handler, _ = make_handler()
    first = await handler.handle(rpc("tools/list"))
    second = await handler.handle(rpc("tools/list", id=2))

    tools = first["result"]["tools"]
    assert tools == second["result"]["tools"]
    assert [t["name"] for t in tools] == tool_names()
    assert len(tools) == 30
    for tool in tools:
        assert set(tool) == {"name", "description", "inputSchema"}
        assert tool["inputSchema"]["type"] == "object"
        assert isinstance(tool["inputSchema"]["properties"], dict)


@pytest.mark.asyncio
async def test_tools_call_wraps_result_in_text_content():
    histogram = RecordingHistogram()
    handler, mock = make_handler({"GET shop.json": {"shop": {"name": "My Store"}}}, histogram=histogram)

    response = await handler.handle(rpc("tools/call", id=7, params={"name": "get_shop_info", "arguments": {}}))

    assert response["id"] == 7
    content = response["result"]["content"]
    assert content[0]["type"] == "text"
    assert json.loads(content[0]["text"]) == {"name": "My Store"}
    assert mock.calls[0]["endpoint"] == "shop.json"
    assert histogram.records[0][1] == {"tool": "get_shop_info", "outcome": "ok"}


@pytest.mark.asyncio
async def test_tools_call_arguments_default_to_empty():
    handler, mock = make_handler({"GET products.json": {"products": []}})
    response = await handler.handle(rpc("tools/call", params={"name": "get_products"}))
    assert "result" in response
    assert mock.calls[0]["query"] == {"limit": "10"}


@pytest.mark.asyncio
async def test_unknown_tool_is_internal_error():
    histogram = RecordingHistogram()
    handler, _ = make_handler(histogram=histogram)

    response = await handler.handle(rpc("tools/call", params={"name": "no_such_tool", "arguments": {}}))

    assert response["error"]["code"] == -32603
    assert response["error"]["message"] == "Internal error"
    assert "Unknown tool" in response["error"]["data"]
    assert histogram.records[0][1]["outcome"] == "error"


@pytest.mark.asyncio
async def test_tools_call_requires_name():
    handler, _ = make_handler()
    response = await handler.handle(rpc("tools/call", params={"arguments": {}}))
    assert response["error"]["code"] == -32603
    assert response["error"]["data"] == "Tool name is required"


@pytest.mark.asyncio
async def test_unknown_method():
    handler, _ = make_handler()
    response = await handler.handle(rpc("resources/list", id=0))
    assert response["id"] == 0
    assert response["error"]["code"] == -32603
    assert response["error"]["data"] == "Unknown method: resources/list"


@pytest.mark.asyncio
async def test_missing_token_is_reported_without_upstream_call():
    handler, mock = make_handler({"GET products.json": {"products": []}}, token=None)
    response = await handler.handle(rpc("tools/call", params={"name": "get_products", "arguments": {}}))
    assert "access token is not configured" in response["error"]["data"]
    assert mock.calls == []


@pytest.mark.asyncio
async def test_upstream_failure_message_is_preserved_without_traceback():
    handler, _ = make_handler({})
    response = await handler.handle(rpc("tools/call", params={"name": "get_shop_info", "arguments": {}}))
    data = response["error"]["data"]
    assert data.startswith("Shopify API Error: 404")
    assert "Traceback" not in data


@pytest.mark.asyncio
@pytest.mark.parametrize("message", [
    {"jsonrpc": "2.0", "method": "notifications/initialized"},
    {"jsonrpc": "2.0", "method": "notifications/initialized", "id": None},
    {"jsonrpc": "2.0", "method": "tools/list"},
    {"jsonrpc": "2.0", "method": "unknown/method"},
    {"jsonrpc": "2.0", "method": "tools/call", "params": {"name": "no_such_tool"}},
    {"jsonrpc": "2.0", "method": "tools/call", "params": {"name": "get_shop_info"}},
])
async def test_notifications_never_get_a_response(message):
    handler, _ = make_handler({})
    assert await handler.handle(message) is None


@pytest.mark.asyncio
async def test_initialized_notification_with_id_is_still_silent():
    handler, _ = make_handler()
    assert await handler.handle(rpc("notifications/initialized", id=3)) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("message", [
    {"jsonrpc": "2.0", "method": "tools/call", "params": [1, 2]},
    {"jsonrpc": "2.0", "params": {}},
    {"jsonrpc": "2.0", "method": 5},
])
async def test_malformed_notifications_get_no_response(message):
    handler, mock = make_handler({})
    assert await handler.handle(message) is None
    assert mock.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("message", [
    {"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": [1, 2]},
    {"jsonrpc": "2.0", "id": 4, "params": {}},
    {"jsonrpc": "2.0", "id": 4, "method": 5},
])
async def test_malformed_requests_are_invalid(message):
    handler, _ = make_handler()
    response = await handler.handle(message)
    assert response["error"]["code"] == -32600
    assert response["id"] == 4


@pytest.mark.asyncio
async def test_boolean_id_is_not_coerced():
    handler, _ = make_handler()
    response = await handler.handle({"jsonrpc": "2.0", "id": True, "method": "tools/list"})
    assert response["error"]["code"] == -32600
    assert response["id"] is None


@pytest.mark.asyncio
async def test_tool_failures_are_logged_as_warnings(caplog):
    handler, _ = make_handler()
    with caplog.at_level(logging.WARNING, logger="shopify_mcp_server.protocol"):
        await handler.handle(rpc("tools/call", params={"name": "get_product_by_id", "arguments": {}}))

    failures = [r for r in caplog.records if r.getMessage() == "request_failed"]
    assert [r.levelno for r in failures] == [logging.WARNING]


@pytest.mark.asyncio
async def test_unexpected_failures_are_logged_as_errors(caplog):
    handler, _ = make_handler()

    async def explode(_name, _args):
        raise RuntimeError("boom")

    handler.dispatcher.invoke = explode  # type: ignore[assignment]
    with caplog.at_level(logging.WARNING, logger="shopify_mcp_server.protocol"):
        response = await handler.handle(rpc("tools/call", params={"name": "get_shop_info"}))

    assert response["error"]["data"] == "boom"
    failures = [r for r in caplog.records if r.getMessage() == "request_failed"]
    assert [r.levelno for r in failures] == [logging.ERROR]
