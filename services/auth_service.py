"""
Bearer credential extraction.

The session provider is external: it hands the dashboard a WooCommerce
access token, which reaches us in the Authorization header. We only check
that one is present and forward it.
"""

from typing import Optional
import structlog

from exceptions import AuthenticationError

logger = structlog.get_logger(__name__)

BEARER_PREFIX = "bearer "


def get_access_token(authorization: Optional[str]) -> str:
    """
    Pull the bearer token out of an Authorization header value.

    Args:
        authorization: Raw header value, e.g. "Bearer abc123"

    Returns:
        The token string

    Raises:
        AuthenticationError: If the header is missing, not a bearer
            credential, or empty
    """
    if not authorization:
        logger.warning("access_token_missing")
        raise AuthenticationError()

    value = authorization.strip()
    if not value.lower().startswith(BEARER_PREFIX):
        logger.warning("access_token_not_bearer")
        raise AuthenticationError()

    token = value[len(BEARER_PREFIX):].strip()
    if not token:
        logger.warning("access_token_empty")
        raise AuthenticationError()

    return token
