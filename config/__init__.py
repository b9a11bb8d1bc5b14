"""
Configuration module.

Exports:
    settings: Application settings instance
    get_settings: Function to get settings (for dependency injection)
    get_woocommerce_client: Shared WooCommerce REST client
    check_connection: Health check function
"""

from config.settings import settings, get_settings, Settings
from config.woocommerce import (
    WooCommerceClient,
    get_woocommerce_client,
    check_connection,
)

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "Settings",

    # WooCommerce
    "WooCommerceClient",
    "get_woocommerce_client",
    "check_connection",
]
