"""
SKU availability checks against WooCommerce.

Two sources are reconciled:
    1. The product index (GET /products?sku=...), which covers simple
       products and variations.
    2. The "disabled variations" ledger of a single product: a JSON string
       in its meta_data. Disabled variations are gone from the index but
       their SKUs stay reserved.

The ledger lookup is best effort. Any failure there is logged and ignored.
"""

import json
from typing import Any, Optional
import structlog
from pydantic import ValidationError as PydanticValidationError

from config import settings, get_woocommerce_client, WooCommerceClient
from models.sku import (
    SKUCheckRequest,
    SKUCheckResult,
    ExistingProduct,
    DisabledVariation,
    LedgerCheck,
    Confidence,
    RESERVED_BY_DISABLED_VARIATION,
)
from exceptions import UpstreamStatusError

logger = structlog.get_logger(__name__)


class SKUService:
    """
    Availability verdicts for vendor SKUs.

    Read-only and idempotent; every call goes to the store.
    """

    def __init__(
        self,
        client: Optional[WooCommerceClient] = None,
        ledger_key: Optional[str] = None
    ):
        self.client = client or get_woocommerce_client()
        self.ledger_key = ledger_key or settings.disabled_variations_meta_key

    # ===================
    # AVAILABILITY
    # ===================

    def check_availability(self, token: str, request: SKUCheckRequest) -> SKUCheckResult:
        """
        Decide whether an SKU is free to use.

        A ledger match wins over the index result. Otherwise the SKU is
        available when no record other than the excluded ones holds it.

        Args:
            token: Vendor bearer token
            request: SKU plus exclusions

        Returns:
            SKUCheckResult with high confidence

        Raises:
            UpstreamStatusError: If the product index answered non-success
            requests.exceptions.RequestException: On transport failure
        """
        logger.info(
            "checking_sku",
            sku=request.sku,
            exclude_product_id=request.exclude_product_id,
            exclude_variation_id=request.exclude_variation_id,
            check_disabled_variations=request.check_disabled_variations
        )

        conflicts = self.find_conflicts(token, request.sku, request.excluded_ids)

        if request.check_disabled_variations and request.exclude_product_id is not None:
            ledger = self.check_disabled_variations(
                token,
                request.exclude_product_id,
                request.sku,
                request.exclude_variation_sku
            )
            if ledger.matched:
                logger.info(
                    "sku_reserved_by_disabled_variation",
                    sku=request.sku,
                    product_id=request.exclude_product_id
                )
                return SKUCheckResult(
                    is_available=False,
                    confidence=Confidence.HIGH,
                    error=RESERVED_BY_DISABLED_VARIATION
                )

        if not conflicts:
            logger.info("sku_available", sku=request.sku)
            return SKUCheckResult(is_available=True, confidence=Confidence.HIGH)

        first = conflicts[0]
        logger.info(
            "sku_taken",
            sku=request.sku,
            conflicts=len(conflicts),
            existing_id=first.get("id")
        )
        return SKUCheckResult(
            is_available=False,
            confidence=Confidence.HIGH,
            existing_product=ExistingProduct(
                id=first["id"],
                name=first.get("name") or "",
                sku=first.get("sku") or "",
                status=first.get("status") or ""
            )
        )

    def find_conflicts(
        self,
        token: str,
        sku: str,
        excluded_ids: set[int]
    ) -> list[dict[str, Any]]:
        """
        Records in the product index holding this exact SKU.

        Args:
            token: Vendor bearer token
            sku: SKU to look up
            excluded_ids: Product/variation IDs to ignore

        Returns:
            Raw product records, excluded IDs removed

        Raises:
            UpstreamStatusError: On non-success status
        """
        response = self.client.get("products", token, params={"sku": sku})

        if not response.ok:
            logger.warning(
                "sku_lookup_failed",
                sku=sku,
                status=response.status_code,
                reason=response.reason
            )
            raise UpstreamStatusError(response.status_code, response.reason or "", "products")

        records = response.json() or []
        return [
            r for r in records
            if _as_int(r.get("id")) not in excluded_ids
        ]

    # ===================
    # DISABLED VARIATIONS LEDGER
    # ===================

    def check_disabled_variations(
        self,
        token: str,
        product_id: int,
        sku: str,
        exclude_variation_sku: Optional[str] = None
    ) -> LedgerCheck:
        """
        Look for the SKU in a product's disabled variations ledger.

        Never raises: any failure, including a malformed product body,
        comes back as an ignored LedgerCheck.

        Args:
            token: Vendor bearer token
            product_id: Product owning the ledger
            sku: SKU to look for
            exclude_variation_sku: Ledger entry belonging to the variation
                being edited

        Returns:
            LedgerCheck
        """
        try:
            entries = self.get_disabled_variations(token, product_id)
        except Exception as e:
            logger.warning(
                "disabled_variations_check_skipped",
                product_id=product_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return LedgerCheck.ignore(str(e))

        for entry in entries:
            if exclude_variation_sku and entry.sku == exclude_variation_sku:
                continue
            if entry.sku == sku:
                return LedgerCheck(matched=True)

        return LedgerCheck(matched=False)

    def get_disabled_variations(self, token: str, product_id: int) -> list[DisabledVariation]:
        """
        Read and parse a product's disabled variations ledger.

        Returns an empty list when the product has no ledger or the stored
        value is not a JSON string. Entries that are not objects or whose
        sku is not a string are skipped one by one.

        Raises:
            UpstreamStatusError: On non-success status
            ValueError: If the body or ledger has an unexpected shape
            requests.exceptions.RequestException: On transport failure
        """
        path = f"products/{product_id}"
        response = self.client.get(path, token)

        if not response.ok:
            raise UpstreamStatusError(response.status_code, response.reason or "", path)

        product = response.json() or {}
        if not isinstance(product, dict):
            raise ValueError(f"{path} did not return an object")

        meta_data = product.get("meta_data") or []
        if not isinstance(meta_data, list):
            raise ValueError(f"{path} meta_data is not a list")

        raw = next(
            (
                m.get("value")
                for m in meta_data
                if isinstance(m, dict) and m.get("key") == self.ledger_key
            ),
            None
        )

        if not raw or not isinstance(raw, str):
            return []

        parsed = json.loads(raw)
        if not isinstance(parsed, list):
            raise ValueError(f"{self.ledger_key} is not a list")

        entries = []
        for item in parsed:
            if not isinstance(item, dict):
                continue
            try:
                entries.append(DisabledVariation.model_validate(item))
            except PydanticValidationError:
                logger.debug("disabled_variation_entry_skipped", product_id=product_id, entry=item)
        return entries


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# ===================
# SINGLETON
# ===================

_sku_service: Optional[SKUService] = None


def get_sku_service() -> SKUService:
    """Get or create SKUService singleton."""
    global _sku_service
    if _sku_service is None:
        _sku_service = SKUService()
    return _sku_service
