"""
Business logic services.

Each service handles one domain area.
"""

from services.sku_service import SKUService, get_sku_service
from services.store_service import StoreService, get_store_service
from services.sku_client import SKUCheckClient
from services.sku_validation_controller import (
    SKUValidationController,
    ValidationState,
)

__all__ = [
    "SKUService",
    "get_sku_service",
    "StoreService",
    "get_store_service",
    "SKUCheckClient",
    "SKUValidationController",
    "ValidationState",
]
