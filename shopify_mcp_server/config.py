"""Configuration management for the Shopify MCP Server."""

from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShopifyConfig(BaseModel):
    """Shopify Admin API configuration, fixed for the process lifetime."""
    store: str = Field(..., description="Shopify store hostname (e.g., 'mystore.myshopify.com')")
    access_token: Optional[str] = Field(None, description="Shopify Admin API access token")
    api_version: str = Field("2024-01", description="Shopify API version")
    timeout: float = Field(30.0, gt=0, description="Upstream request timeout in seconds")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "store": "mystore.myshopify.com",
                "access_token": "shpat_xxxxx",
                "api_version": "2024-01",
            }
        },
    )

    @field_validator("access_token")
    @classmethod
    def _blank_token_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    @property
    def token_configured(self) -> bool:
        return self.access_token is not None

    @property
    def base_url(self) -> str:
        return f"https://{self.store}/admin/api/{self.api_version}"


class ServerSettings(BaseSettings):
    """Process settings loaded from the environment (and an optional .env file)."""

    store: str = Field("your-store.myshopify.com", alias="SHOPIFY_STORE")
    access_token: Optional[str] = Field(None, alias="SHOPIFY_ACCESS_TOKEN")
    api_version: str = Field("2024-01", alias="SHOPIFY_API_VERSION")
    timeout: float = Field(30.0, gt=0, alias="SHOPIFY_TIMEOUT")

    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, gt=0, alias="PORT")
    serverless: bool = Field(False, alias="VERCEL", description="Export the ASGI app only, never listen")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    metrics_console: bool = Field(False, alias="MCP_METRICS_CONSOLE")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    def shopify_config(self) -> ShopifyConfig:
        """Build the immutable upstream configuration."""
        return ShopifyConfig(
            store=self.store,
            access_token=self.access_token,
            api_version=self.api_version,
            timeout=self.timeout,
        )
