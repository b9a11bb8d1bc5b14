"""
Unit tests for SKUService.

Run: pytest tests/unit/test_sku_service.py -v
"""

import pytest
import requests

from services.sku_service import SKUService
from models.sku import SKUCheckRequest, Confidence, SKUOutcome, RESERVED_BY_DISABLED_VARIATION
from exceptions import UpstreamStatusError

from tests.factories import ProductFactory


TOKEN = "test-token"


class TestCheckAvailability:
    """Tests for SKUService.check_availability()"""

    def test_taken_sku_reports_existing_product(self, sku_service, mock_woocommerce, sample_product_data):
        """ABC-1 on product 10 is taken when nothing is excluded."""
        # Arrange
        mock_woocommerce.set_response("products", [sample_product_data])

        # Act
        result = sku_service.check_availability(TOKEN, SKUCheckRequest(sku="ABC-1"))

        # Assert
        assert result.is_available is False
        assert result.confidence == Confidence.HIGH
        assert result.existing_product.id == 10
        assert result.existing_product.name == "Blue Shirt"
        assert result.existing_product.sku == "ABC-1"
        assert result.existing_product.status == "publish"
        assert result.outcome == SKUOutcome.TAKEN

    def test_excluding_owner_makes_sku_available(self, sku_service, mock_woocommerce, sample_product_data):
        """Editing product 10 must not conflict with itself."""
        mock_woocommerce.set_response("products", [sample_product_data])

        result = sku_service.check_availability(
            TOKEN, SKUCheckRequest(sku="ABC-1", exclude_product_id=10)
        )

        assert result.is_available is True
        assert result.confidence == Confidence.HIGH
        assert result.existing_product is None

    def test_excluding_variation_id(self, sku_service, mock_woocommerce):
        variation = ProductFactory.create(id=77, sku="V-1", type="variation")
        mock_woocommerce.set_response("products", [variation])

        result = sku_service.check_availability(
            TOKEN, SKUCheckRequest(sku="V-1", exclude_product_id=10, exclude_variation_id=77)
        )

        assert result.is_available is True

    def test_string_ids_compare_as_ints(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products", [ProductFactory.create(id="10", sku="ABC-1")])

        result = sku_service.check_availability(
            TOKEN, SKUCheckRequest(sku="ABC-1", exclude_product_id=10)
        )

        assert result.is_available is True

    def test_other_holder_still_conflicts(self, sku_service, mock_woocommerce):
        """Exclusion removes only the excluded record."""
        mock_woocommerce.set_response("products", [
            ProductFactory.create(id=10, sku="ABC-1"),
            ProductFactory.create(id=11, sku="ABC-1", status="draft"),
        ])

        result = sku_service.check_availability(
            TOKEN, SKUCheckRequest(sku="ABC-1", exclude_product_id=10)
        )

        assert result.is_available is False
        assert result.existing_product.id == 11
        assert result.existing_product.status == "draft"

    def test_unknown_sku_is_available(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products", [])

        result = sku_service.check_availability(TOKEN, SKUCheckRequest(sku="NEW-1"))

        assert result.is_available is True
        assert result.outcome == SKUOutcome.AVAILABLE

    def test_queries_index_by_exact_sku_with_token(self, sku_service, mock_woocommerce):
        sku_service.check_availability(TOKEN, SKUCheckRequest(sku="NEW-1"))

        assert mock_woocommerce.calls[0] == ("products", TOKEN, {"sku": "NEW-1"})

    def test_padded_sku_is_looked_up_as_given(self, sku_service, mock_woocommerce):
        sku_service.check_availability(TOKEN, SKUCheckRequest(sku=" NEW-1 "))

        assert mock_woocommerce.calls[0] == ("products", TOKEN, {"sku": " NEW-1 "})

    def test_upstream_failure_raises_with_status(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products", status_code=502, reason="Bad Gateway")

        with pytest.raises(UpstreamStatusError) as exc_info:
            sku_service.check_availability(TOKEN, SKUCheckRequest(sku="ABC-1"))

        assert exc_info.value.upstream_status == 502
        assert exc_info.value.reason == "Bad Gateway"


class TestDisabledVariations:
    """Ledger handling in check_availability()"""

    def test_reserved_sku_is_unavailable(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products/10", ProductFactory.with_disabled_variations(10, ["X"]))

        result = sku_service.check_availability(
            TOKEN,
            SKUCheckRequest(sku="X", exclude_product_id=10, check_disabled_variations=True)
        )

        assert result.is_available is False
        assert result.confidence == Confidence.HIGH
        assert result.error == RESERVED_BY_DISABLED_VARIATION
        assert result.outcome == SKUOutcome.RESERVED

    def test_own_ledger_entry_is_not_a_conflict(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products/10", ProductFactory.with_disabled_variations(10, ["X"]))

        result = sku_service.check_availability(
            TOKEN,
            SKUCheckRequest(
                sku="X",
                exclude_product_id=10,
                check_disabled_variations=True,
                exclude_variation_sku="X"
            )
        )

        assert result.is_available is True

    def test_different_excluded_sku_still_reserved(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products/10", ProductFactory.with_disabled_variations(10, ["X", "Y"]))

        result = sku_service.check_availability(
            TOKEN,
            SKUCheckRequest(
                sku="X",
                exclude_product_id=10,
                check_disabled_variations=True,
                exclude_variation_sku="Y"
            )
        )

        assert result.error == RESERVED_BY_DISABLED_VARIATION

    def test_ledger_match_wins_over_index_conflict(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products", [ProductFactory.create(id=55, sku="X")])
        mock_woocommerce.set_response("products/10", ProductFactory.with_disabled_variations(10, ["X"]))

        result = sku_service.check_availability(
            TOKEN,
            SKUCheckRequest(sku="X", exclude_product_id=10, check_disabled_variations=True)
        )

        assert result.error == RESERVED_BY_DISABLED_VARIATION
        assert result.existing_product is None

    def test_ledger_not_read_without_flag(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products/10", ProductFactory.with_disabled_variations(10, ["X"]))

        result = sku_service.check_availability(
            TOKEN, SKUCheckRequest(sku="X", exclude_product_id=10)
        )

        assert result.is_available is True
        assert "products/10" not in mock_woocommerce.paths()

    def test_ledger_not_read_without_product(self, sku_service, mock_woocommerce):
        sku_service.check_availability(
            TOKEN, SKUCheckRequest(sku="X", check_disabled_variations=True)
        )

        assert mock_woocommerce.paths() == ["products"]

    @pytest.mark.parametrize("setup", [
        lambda m: m.set_response("products/10", status_code=500, reason="Server Error"),
        lambda m: m.set_error("products/10", requests.ConnectionError("down")),
        lambda m: m.set_response("products/10", ProductFactory.with_disabled_variations(10, [], raw="{not json")),
        lambda m: m.set_response("products/10", ProductFactory.with_disabled_variations(10, [], raw='{"sku": "X"}')),
        lambda m: m.set_response("products/10", ValueError("bad body")),
        lambda m: m.set_response("products/10", [{"id": 10}]),
        lambda m: m.set_response("products/10", ProductFactory.create(id=10, meta_data=[None])),
        lambda m: m.set_response("products/10", ProductFactory.create(id=10, meta_data=["junk", 7])),
        lambda m: m.set_response("products/10", {"id": 10, "meta_data": {"_disabled_variations": "[]"}}),
    ])
    def test_ledger_failures_are_ignored(self, sku_service, mock_woocommerce, setup):
        """A broken ledger never fails the check."""
        setup(mock_woocommerce)

        result = sku_service.check_availability(
            TOKEN,
            SKUCheckRequest(sku="X", exclude_product_id=10, check_disabled_variations=True)
        )

        assert result.is_available is True
        assert result.confidence == Confidence.HIGH

    def test_non_string_ledger_is_skipped(self, sku_service, mock_woocommerce):
        product = ProductFactory.create(
            id=10, meta_data=[{"key": "_disabled_variations", "value": [{"sku": "X"}]}]
        )
        mock_woocommerce.set_response("products/10", product)

        ledger = sku_service.check_disabled_variations(TOKEN, 10, "X")

        assert ledger.matched is False
        assert ledger.ignored is False

    def test_failed_lookup_reports_ignored(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products/10", status_code=404, reason="Not Found")

        ledger = sku_service.check_disabled_variations(TOKEN, 10, "X")

        assert ledger.matched is False
        assert ledger.ignored is True

    def test_entries_without_sku_never_match(self, sku_service, mock_woocommerce):
        raw = '[{"id": "var-1"}, "junk", {"sku": "Z"}]'
        mock_woocommerce.set_response("products/10", ProductFactory.with_disabled_variations(10, [], raw=raw))

        assert sku_service.get_disabled_variations(TOKEN, 10)[0].sku is None
        assert sku_service.check_disabled_variations(TOKEN, 10, "X").matched is False
        assert sku_service.check_disabled_variations(TOKEN, 10, "Z").matched is True

    def test_malformed_product_body_reports_ignored(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products/10", {"id": 10, "meta_data": "oops"})

        ledger = sku_service.check_disabled_variations(TOKEN, 10, "X")

        assert ledger.matched is False
        assert ledger.ignored is True

    def test_bad_entry_does_not_hide_the_rest(self, sku_service, mock_woocommerce):
        raw = '[{"sku": 123}, {"sku": ["Y"]}, {"sku": "X"}]'
        mock_woocommerce.set_response("products/10", ProductFactory.with_disabled_variations(10, [], raw=raw))

        result = sku_service.check_availability(
            TOKEN,
            SKUCheckRequest(sku="X", exclude_product_id=10, check_disabled_variations=True)
        )

        assert [e.sku for e in sku_service.get_disabled_variations(TOKEN, 10)] == ["X"]
        assert result.error == RESERVED_BY_DISABLED_VARIATION

    def test_ledger_skus_compare_exactly(self, sku_service, mock_woocommerce):
        mock_woocommerce.set_response("products/10", ProductFactory.with_disabled_variations(10, ["X "]))

        assert sku_service.get_disabled_variations(TOKEN, 10)[0].sku == "X "
        assert sku_service.check_disabled_variations(TOKEN, 10, "X").matched is False
        assert sku_service.check_disabled_variations(TOKEN, 10, "X ").matched is True

    def test_custom_ledger_key(self, mock_woocommerce):
        service = SKUService(client=mock_woocommerce, ledger_key="_archived_skus")
        mock_woocommerce.set_response(
            "products/10", ProductFactory.with_disabled_variations(10, ["X"], key="_archived_skus")
        )

        assert service.check_disabled_variations(TOKEN, 10, "X").matched is True
