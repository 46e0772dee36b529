"""Module-level ASGI app for serverless platforms.

Run with: uvicorn shopify_mcp_server.asgi:app
"""

import logging

from .config import ServerSettings
from .router import create_app

settings = ServerSettings()
logging.basicConfig(level=settings.log_level.upper())

app = create_app(settings)
