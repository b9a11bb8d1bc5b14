"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from unittest.mock import MagicMock, patch
from typing import Any, Generator, Optional

from tests.factories import MockResponse


# ===================
# MOCK WOOCOMMERCE
# ===================

class MockWooCommerce:
    """
    Routes GET paths to canned responses.

    Usage:
        mock_woocommerce.set_response("products", [ProductFactory.create()])
        mock_woocommerce.set_response("products/10", status_code=404, reason="Not Found")
        mock_woocommerce.set_error("products/10", requests.ConnectionError("down"))
    """

    def __init__(self):
        self._responses: dict[str, list] = {}
        self.calls: list[tuple[str, str, Optional[dict]]] = []

    def set_response(self, path: str, data: Any = None, status_code: int = 200,
                     reason: str = "OK", headers: Optional[dict] = None):
        self._responses[path] = [MockResponse(data, status_code, reason, headers)]

    def add_response(self, path: str, data: Any = None, headers: Optional[dict] = None):
        """Queue another response for the same path (paged endpoints)."""
        self._responses.setdefault(path, []).append(MockResponse(data, headers=headers))

    def set_error(self, path: str, error: Exception):
        self._responses[path] = [error]

    def get(self, path: str, token: str, params: Optional[dict] = None):
        self.calls.append((path, token, params))
        queue = self._responses.get(path)
        if not queue:
            return MockResponse([] if path == "products" else {}, 200)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def paths(self) -> list[str]:
        return [c[0] for c in self.calls]


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_woocommerce() -> MockWooCommerce:
    """Fake WooCommerce REST client."""
    return MockWooCommerce()


@pytest.fixture
def sku_service(mock_woocommerce):
    """SKUService wired to the fake store."""
    from services.sku_service import SKUService
    return SKUService(client=mock_woocommerce, ledger_key="_disabled_variations")


@pytest.fixture
def store_service(mock_woocommerce):
    """StoreService wired to the fake store."""
    from services.store_service import StoreService
    return StoreService(client=mock_woocommerce)


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": "Bearer test-token"}


@pytest.fixture
def sample_product_data() -> dict:
    """A published product holding SKU ABC-1."""
    return {
        "id": 10,
        "name": "Blue Shirt",
        "sku": "ABC-1",
        "status": "publish",
        "type": "simple",
        "meta_data": []
    }


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(sku_service, store_service) -> Generator:
    """
    FastAPI test client backed by the fake store.

    Usage:
        def test_endpoint(test_client, mock_woocommerce, auth_headers):
            mock_woocommerce.set_response("products", [...])
            response = test_client.get("/api/products/check-sku?sku=X", headers=auth_headers)
    """
    from fastapi.testclient import TestClient
    from main import app

    with patch("routes.products.get_sku_service", return_value=sku_service):
        with patch("routes.products.get_store_service", return_value=store_service):
            with patch("routes.vendor.get_store_service", return_value=store_service):
                yield TestClient(app)


@pytest.fixture
def mock_http_session() -> MagicMock:
    """requests.Session double for the check-sku client."""
    return MagicMock()
