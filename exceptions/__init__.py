"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,
    AuthenticationError,
    ExternalServiceError,

    # SKU
    MissingSKUError,
    UpstreamStatusError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",
    "AuthenticationError",
    "ExternalServiceError",

    # SKU
    "MissingSKUError",
    "UpstreamStatusError",
]
