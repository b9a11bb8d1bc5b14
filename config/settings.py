"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # WOOCOMMERCE
    # ===================
    wordpress_site_url: str = Field(
        default="http://localhost:8080",
        description="WordPress site hosting the WooCommerce store"
    )
    woocommerce_api_path: str = Field(
        default="/wp-json/wc/v3",
        description="WooCommerce REST API base path"
    )
    woocommerce_timeout_seconds: Optional[float] = Field(
        None,
        gt=0,
        description="Timeout for WooCommerce requests (unset = transport default)"
    )

    # ===================
    # SKU VALIDATION
    # ===================
    disabled_variations_meta_key: str = Field(
        default="_disabled_variations",
        description="Product meta_data key holding the disabled variations ledger"
    )
    sku_debounce_ms: int = Field(
        default=300,
        ge=50,
        le=2000,
        description="Quiet period before an SKU is validated"
    )
    sku_check_url: str = Field(
        default="http://localhost:8000/api/products/check-sku",
        description="Proxy endpoint used by the SKU check client"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed to call the API"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def woocommerce_base_url(self) -> str:
        """Full WooCommerce REST base URL."""
        return self.wordpress_site_url.rstrip("/") + self.woocommerce_api_path

    @property
    def sku_debounce_seconds(self) -> float:
        return self.sku_debounce_ms / 1000


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
