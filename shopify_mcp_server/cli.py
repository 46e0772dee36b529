"""Command-line interface for the Shopify MCP Server."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.table import Table
from rich.json import JSON

from .client import ShopifyClient
from .config import ServerSettings
from .dispatcher import ToolDispatcher
from .errors import ShopifyMCPError
from .mock_client import MockShopifyClient
from .registry import list_tools

app = typer.Typer(
    name="shopify-mcp",
    help="Shopify Admin API MCP server CLI"
)
console = Console()


def load_settings(env_file: Optional[str] = None) -> ServerSettings:
    """Load settings from the environment, optionally from a specific .env file."""
    if env_file is None:
        return ServerSettings()
    if not Path(env_file).exists():
        console.print(f"[red]Error: Env file not found: {env_file}[/red]")
        raise typer.Exit(1)
    return ServerSettings(_env_file=env_file)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind to (default: HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, help="Port to bind to (default: PORT or 3000)"),
    env_file: Optional[str] = typer.Option(None, help="Path to a .env file"),
):
    """Start the MCP server."""
    import uvicorn
    from .router import create_app

    settings = load_settings(env_file)
    if settings.serverless:
        console.print("[yellow]Serverless mode (VERCEL=1): serve shopify_mcp_server.asgi:app instead.[/yellow]")
        raise typer.Exit(1)

    logging.basicConfig(level=settings.log_level.upper())
    bind_host = host or settings.host
    bind_port = port or settings.port

    console.print(f"[green]Shopify MCP Server running on {bind_host}:{bind_port}[/green]")
    console.print(f"[blue]Store:[/blue] {settings.store}")
    token_state = "Configured" if settings.shopify_config().token_configured else "[red]NOT CONFIGURED[/red]"
    console.print(f"[blue]Access Token:[/blue] {token_state}")

    uvicorn.run(create_app(settings), host=bind_host, port=bind_port)


@app.command()
def tools():
    """List the tools advertised through tools/list."""
    table = Table(title="Shopify MCP Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Required", style="yellow")
    table.add_column("Description", style="green")

    for tool in list_tools():
        required = ", ".join(tool.input_schema.get("required", []))
        table.add_row(tool.name, required or "-", tool.description)

    console.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name"),
    args: str = typer.Option("{}", "--args", help="Tool arguments as a JSON object"),
    sandbox: bool = typer.Option(False, help="Answer from built-in sample data instead of Shopify"),
    env_file: Optional[str] = typer.Option(None, help="Path to a .env file"),
):
    """Invoke a single tool and print its result."""
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: --args is not valid JSON: {e}[/red]")
        raise typer.Exit(1)

    async def _call():
        settings = load_settings(env_file)
        config = settings.shopify_config()
        client = None
        if sandbox:
            client = MockShopifyClient()
            if not config.token_configured:
                config = config.model_copy(update={"access_token": "sandbox"})

        async with ShopifyClient(config, client=client) as shopify:
            result = await ToolDispatcher(shopify).invoke(name, arguments)
        console.print(JSON(result.content[0].text))

    try:
        asyncio.run(_call())
    except ShopifyMCPError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)


@app.command()
def check(
    env_file: Optional[str] = typer.Option(None, help="Path to a .env file"),
):
    """Validate the server configuration."""
    try:
        settings = load_settings(env_file)
        config = settings.shopify_config()
    except ValueError as e:
        console.print(f"[red]✗ Configuration error:[/red] {str(e)}")
        raise typer.Exit(1)

    console.print(f"[bold]Store:[/bold] {config.store}")
    console.print(f"[bold]API version:[/bold] {config.api_version}")
    console.print(f"[bold]Mode:[/bold] {'serverless' if settings.serverless else 'standalone'}")
    if not config.token_configured:
        console.print("[red]✗ SHOPIFY_ACCESS_TOKEN is not configured[/red]")
        raise typer.Exit(1)
    console.print("[green]✓[/green] Configuration is valid!")


@app.command("export-mcp")
def export_mcp(
    output: str = typer.Option("mcp.json", help="Output MCP config file path"),
    url: str = typer.Option("http://localhost:3000/", help="URL of the running MCP server"),
):
    """Generate an MCP client config file for Claude Desktop or Cursor."""
    mcp_config = {
        "mcpServers": {
            "shopify": {
                "type": "http",
                "url": url,
            }
        }
    }

    output_path = Path(output)
    with open(output_path, "w") as f:
        json.dump(mcp_config, f, indent=2)

    console.print(f"[green]✓[/green] MCP config created: {output}")


if __name__ == "__main__":
    app()
