"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, CamelSchema
from models.sku import (
    Confidence,
    SKUOutcome,
    ExistingProduct,
    SKUCheckRequest,
    SKUCheckResult,
    DisabledVariation,
    LedgerCheck,
    allow_submission,
)
from models.vendor import VendorInfo

__all__ = [
    # Base
    "BaseSchema",
    "CamelSchema",

    # SKU
    "Confidence",
    "SKUOutcome",
    "ExistingProduct",
    "SKUCheckRequest",
    "SKUCheckResult",
    "DisabledVariation",
    "LedgerCheck",
    "allow_submission",

    # Vendor
    "VendorInfo",
]
