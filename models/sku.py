"""
SKU availability schemas.

A check answers "may this SKU be used?" with a confidence level. High
confidence means WooCommerce gave a definitive answer; low confidence means
the check itself failed and the answer must not block the vendor.
"""

from pydantic import Field, ConfigDict
from typing import Optional
from enum import Enum

from models.base import BaseSchema, CamelSchema


RESERVED_BY_DISABLED_VARIATION = "SKU is reserved by a disabled variation"


class Confidence(str, Enum):
    """How much a verdict can be trusted."""
    HIGH = "high"
    LOW = "low"


class SKUOutcome(str, Enum):
    """Tagged view of a check result."""
    AVAILABLE = "available"
    TAKEN = "taken"
    RESERVED = "reserved"
    INDETERMINATE = "indeterminate"


class ExistingProduct(CamelSchema):
    """Product (or variation) already holding an SKU."""

    id: int = Field(..., description="WooCommerce product/variation ID")
    name: str = Field("", description="Product name")
    sku: str = Field("", description="SKU as stored upstream")
    status: str = Field("", description="publish, draft, pending, private...")


class SKUCheckRequest(BaseSchema):
    """
    One availability check.

    exclude_product_id / exclude_variation_id drop the record being edited
    from the conflict set. exclude_variation_sku lets a variation validate
    against its own entry in the disabled variations ledger.

    The SKU is kept exactly as typed. Upstream matching is exact, so "ABC-1 "
    and "ABC-1" are different SKUs.
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=False,
        validate_assignment=True
    )

    sku: str = Field(..., min_length=1, description="SKU to check")
    exclude_product_id: Optional[int] = Field(None, description="Product being edited")
    exclude_variation_id: Optional[int] = Field(None, description="Variation being edited")
    check_disabled_variations: bool = Field(
        False,
        description="Also consult the product's disabled variations ledger"
    )
    exclude_variation_sku: Optional[str] = Field(
        None,
        description="Ledger SKU that belongs to the variation being edited"
    )

    @property
    def excluded_ids(self) -> set[int]:
        return {
            i for i in (self.exclude_product_id, self.exclude_variation_id)
            if i is not None
        }


class SKUCheckResult(CamelSchema):
    """Availability verdict returned by the check-sku endpoint."""

    is_available: bool = Field(..., description="Whether the SKU may be used")
    confidence: Confidence = Field(..., description="high = definitive, low = check failed")
    error: Optional[str] = Field(None, description="Reason when not available or not verified")
    existing_product: Optional[ExistingProduct] = Field(
        None,
        description="First conflicting record when the SKU is taken"
    )

    @property
    def outcome(self) -> SKUOutcome:
        if self.confidence == Confidence.LOW:
            return SKUOutcome.INDETERMINATE
        if self.is_available:
            return SKUOutcome.AVAILABLE
        if self.existing_product is None and self.error == RESERVED_BY_DISABLED_VARIATION:
            return SKUOutcome.RESERVED
        return SKUOutcome.TAKEN

    @classmethod
    def degraded(cls, error: str, is_available: bool = False) -> "SKUCheckResult":
        """Result for a check that could not be completed."""
        return cls(is_available=is_available, confidence=Confidence.LOW, error=error)


class DisabledVariation(BaseSchema):
    """
    One entry of the disabled variations ledger. Other keys are kept.

    SKUs are compared exactly as stored, so no whitespace stripping.
    """

    model_config = ConfigDict(extra="allow", str_strip_whitespace=False)

    sku: Optional[str] = None


class LedgerCheck(BaseSchema):
    """
    Outcome of the disabled variations lookup.

    Either the ledger was read (matched True/False) or the lookup was
    ignored, in which case ignored_reason says why. An ignored lookup never
    affects the verdict.
    """

    matched: bool = False
    ignored_reason: Optional[str] = None

    @property
    def ignored(self) -> bool:
        return self.ignored_reason is not None

    @classmethod
    def ignore(cls, reason: str) -> "LedgerCheck":
        return cls(matched=False, ignored_reason=reason)


def allow_submission(result: Optional[SKUCheckResult]) -> bool:
    """
    Fail-open submission policy.

    Only a definitive "not available" blocks the form. No result (empty
    input) and low-confidence results let the vendor proceed.
    """
    if result is None:
        return True
    if result.confidence == Confidence.LOW:
        return True
    return result.is_available
