"""
Custom exception classes for the application.

Every error carries a code, an HTTP status and a details dict so routes can
render a uniform JSON body.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "SKU_REQUIRED")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None,
        status_code: int = 422
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=details
        )


class AuthenticationError(AppError):
    """No usable bearer credential (401)."""

    def __init__(self, message: str = "No access token available"):
        super().__init__(
            code="UNAUTHENTICATED",
            message=message,
            status_code=401
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


# ===================
# SKU ERRORS
# ===================

class MissingSKUError(ValidationError):
    """Request did not carry an SKU (400)."""

    def __init__(self):
        super().__init__(
            code="SKU_REQUIRED",
            message="SKU parameter is required",
            status_code=400
        )


class UpstreamStatusError(ExternalServiceError):
    """
    WooCommerce answered with a non-success status.

    Keeps the upstream status so the proxy can pass it through instead of
    turning it into a generic 500.
    """

    def __init__(self, upstream_status: int, reason: str, path: str):
        super().__init__(
            service="woocommerce",
            message=f"Upstream returned {upstream_status} for {path}",
            details={"upstream_status": upstream_status, "reason": reason, "path": path}
        )
        self.upstream_status = upstream_status
        self.reason = reason
