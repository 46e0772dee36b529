from shopify_mcp_server import ServerSettings, create_app

settings = ServerSettings(
    store="mystore.myshopify.com",
    access_token="shpat_xxxxx",
)

app = create_app(settings)

# Run: uvicorn examples.simple_app:app --port 3000 --reload
