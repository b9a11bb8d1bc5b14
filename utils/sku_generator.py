"""
SKU candidate generation.

Candidates look like "42-BLUSHI-3fa9c1-0b7d22": vendor ID, an optional
prefix built from the product name, and two random hex tokens.

Uniqueness is probabilistic only (16M values per token). A candidate is not
retried on collision here; it must go through the availability check like
any typed SKU.
"""

import re
import secrets
from typing import Optional


TOKEN_BYTES = 3  # 6 hex characters
PREFIX_WORDS = 2
PREFIX_WORD_LENGTH = 3
PREFIX_MAX_LENGTH = 6


def _random_token() -> str:
    return secrets.token_hex(TOKEN_BYTES)


def product_prefix(product_name: Optional[str]) -> str:
    """
    Build the name prefix of a candidate.

    - "Blue Shirt" → "BLUSHI"
    - "  tee  " → "TEE"
    - "" or None → ""

    Args:
        product_name: Free-form product name (any Unicode)

    Returns:
        Up to 6 upper-cased characters, empty if there are no words
    """
    if not product_name:
        return ""

    words = re.split(r"\s+", product_name.strip())[:PREFIX_WORDS]
    prefix = "".join(w[:PREFIX_WORD_LENGTH].upper() for w in words if w)
    return prefix[:PREFIX_MAX_LENGTH]


def generate_unique_sku(vendor_id: int, product_name: Optional[str] = None) -> str:
    """
    Generate an SKU candidate: vendorid-[prefix-]token-token.

    Args:
        vendor_id: Vendor's store ID
        product_name: Optional product name for a readable prefix

    Returns:
        Candidate SKU string
    """
    parts = [product_prefix(product_name), _random_token(), _random_token()]
    unique_code = "-".join(p for p in parts if p)
    return f"{vendor_id}-{unique_code}"


def generate_simple_sku(vendor_id: int) -> str:
    """Fallback candidate with a single token: vendorid-token."""
    return f"{vendor_id}-{_random_token()}"
