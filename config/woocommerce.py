"""
WooCommerce REST client management.

Provides a shared requests session for calls to the store's REST API.
Every call carries the vendor's bearer token; the client itself holds no
credentials.
"""

from functools import lru_cache
from typing import Any, Optional
import requests
import structlog

from config.settings import settings

logger = structlog.get_logger(__name__)


class WooCommerceClient:
    """
    Thin wrapper around a requests.Session bound to the WooCommerce base URL.

    Returns raw responses; callers decide what a non-success status means.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(
        self,
        path: str,
        token: str,
        params: Optional[dict[str, Any]] = None
    ) -> requests.Response:
        """
        Issue an authenticated GET against the store API.

        Args:
            path: Path relative to the REST base (e.g. "products/10")
            token: Bearer token from the auth provider
            params: Query string parameters

        Returns:
            requests.Response (status not checked)

        Raises:
            requests.exceptions.RequestException: On transport failure
        """
        logger.debug("woocommerce_request", path=path, params=params)

        response = self.session.get(
            self.url(path),
            params=params,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )

        logger.debug(
            "woocommerce_response",
            path=path,
            status=response.status_code
        )
        return response


@lru_cache()
def get_woocommerce_client() -> WooCommerceClient:
    """
    Get cached WooCommerce client instance.

    Call get_woocommerce_client.cache_clear() to rebuild the session.
    """
    logger.info(
        "woocommerce_client_created",
        url=settings.woocommerce_base_url,
        timeout=settings.woocommerce_timeout_seconds
    )
    return WooCommerceClient(
        settings.woocommerce_base_url,
        timeout=settings.woocommerce_timeout_seconds
    )


# ===================
# HELPER FUNCTIONS
# ===================

def check_connection() -> dict:
    """
    Check that the WordPress REST index is reachable.

    Returns:
        dict: Connection status with details
    """
    try:
        response = requests.get(
            settings.wordpress_site_url.rstrip("/") + "/wp-json",
            timeout=settings.woocommerce_timeout_seconds or 10
        )
        if response.ok:
            return {"status": "healthy", "upstream_status": response.status_code}
        return {
            "status": "unhealthy",
            "upstream_status": response.status_code,
            "error": response.reason
        }

    except requests.exceptions.RequestException as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }

