import json

from typer.testing import CliRunner

from shopify_mcp_server.cli import app

runner = CliRunner()


def test_tools_lists_catalog():
    result = runner.invoke(app, ["tools"])
    assert result.exit_code == 0
    assert "Shopify MCP Tools" in result.output


def test_call_in_sandbox(monkeypatch):
    monkeypatch.delenv("SHOPIFY_ACCESS_TOKEN", raising=False)
    result = runner.invoke(app, ["call", "get_shop_info", "--sandbox"])
    assert result.exit_code == 0
    assert "Mock Store" in result.output


def test_call_rejects_invalid_json():
    result = runner.invoke(app, ["call", "get_products", "--args", "{oops", "--sandbox"])
    assert result.exit_code == 1


def test_call_reports_tool_errors(monkeypatch):
    monkeypatch.delenv("SHOPIFY_ACCESS_TOKEN", raising=False)
    result = runner.invoke(app, ["call", "get_order_by_id", "--args", "{}", "--sandbox"])
    assert result.exit_code == 1
    assert "order_id is required" in result.output


def test_export_mcp(tmp_path):
    output = tmp_path / "mcp.json"
    result = runner.invoke(app, ["export-mcp", "--output", str(output), "--url", "http://localhost:4000/"])
    assert result.exit_code == 0
    assert json.loads(output.read_text()) == {
        "mcpServers": {"shopify": {"type": "http", "url": "http://localhost:4000/"}}
    }
