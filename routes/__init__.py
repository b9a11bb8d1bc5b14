"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.products import router as products_router
from routes.vendor import router as vendor_router

__all__ = [
    "products_router",
    "vendor_router",
]
