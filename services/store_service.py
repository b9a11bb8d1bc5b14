"""
Read-through access to store data the product form needs: the vendor
profile (its ID prefixes generated SKUs), categories and attributes.
"""

from typing import Any, Optional
import structlog

from config import get_woocommerce_client, WooCommerceClient
from models.vendor import VendorInfo
from exceptions import UpstreamStatusError

logger = structlog.get_logger(__name__)

CATEGORIES_PER_PAGE = 100  # WooCommerce maximum


class StoreService:
    """Vendor, category and attribute lookups."""

    def __init__(self, client: Optional[WooCommerceClient] = None):
        self.client = client or get_woocommerce_client()

    def _get_json(self, path: str, token: str, params: Optional[dict] = None):
        response = self.client.get(path, token, params=params)
        if not response.ok:
            logger.warning(
                "store_request_failed",
                path=path,
                status=response.status_code
            )
            raise UpstreamStatusError(response.status_code, response.reason or "", path)
        return response, response.json()

    def get_vendor_info(self, token: str) -> VendorInfo:
        """
        Current vendor's profile.

        Raises:
            UpstreamStatusError: On non-success status
        """
        _, data = self._get_json("vendor", token)
        vendor = VendorInfo.from_upstream(data or {})
        logger.info("vendor_info_retrieved", vendor_id=vendor.id)
        return vendor

    def get_categories(self, token: str) -> list[dict[str, Any]]:
        """
        All product categories, following X-WP-TotalPages.

        Raises:
            UpstreamStatusError: On non-success status for any page
        """
        categories: list[dict[str, Any]] = []
        page = 1

        while True:
            response, batch = self._get_json(
                "products/categories",
                token,
                params={"per_page": CATEGORIES_PER_PAGE, "page": page}
            )
            categories.extend(batch or [])

            total_pages = int(response.headers.get("x-wp-totalpages") or 1)
            if page >= total_pages:
                break
            page += 1

        logger.info("categories_retrieved", count=len(categories), pages=page)
        return categories

    def get_attributes(self, token: str) -> list[dict[str, Any]]:
        """
        Global product attributes.

        Raises:
            UpstreamStatusError: On non-success status
        """
        _, attributes = self._get_json("products/attributes", token)
        return attributes or []


_store_service: Optional[StoreService] = None


def get_store_service() -> StoreService:
    """Get or create StoreService instance."""
    global _store_service
    if _store_service is None:
        _store_service = StoreService()
    return _store_service
