"""
Product API routes.

Proxies the product-form lookups to WooCommerce so the dashboard never calls
the store cross-origin. The vendor's bearer token is forwarded as-is.
"""

from fastapi import APIRouter, Query, Header
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.sku import SKUCheckRequest, SKUCheckResult
from services.auth_service import get_access_token
from services.sku_service import get_sku_service
from services.store_service import get_store_service
from exceptions import (
    AppError,
    AuthenticationError,
    MissingSKUError,
    UpstreamStatusError
)

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to the dashboard's {"error": ...} body."""
    if isinstance(e, UpstreamStatusError):
        return JSONResponse(
            status_code=e.upstream_status,
            content={"error": f"HTTP error! status: {e.upstream_status}"}
        )
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content={"error": e.message}
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={"error": str(e) or "Unknown error"}
    )


# ===================
# ROUTES
# ===================

@router.get("/check-sku", response_model=SKUCheckResult, response_model_exclude_none=True)
async def check_sku(
    sku: Optional[str] = Query(None, description="SKU to check"),
    exclude_product_id: Optional[int] = Query(
        None, alias="excludeProductId", description="Product being edited"
    ),
    exclude_variation_id: Optional[int] = Query(
        None, alias="excludeVariationId", description="Variation being edited"
    ),
    check_disabled_variations: Optional[str] = Query(
        None, alias="checkDisabledVariations", description='"true" to consult the ledger'
    ),
    exclude_variation_sku: Optional[str] = Query(
        None, alias="excludeVariationSku", description="Ledger SKU of the variation being edited"
    ),
    authorization: Optional[str] = Header(None)
):
    """
    Check whether an SKU is free to use.

    Returns:
        {isAvailable, confidence, error?, existingProduct?}

    Raises:
        400: sku missing
        401: no bearer credential
        upstream status: product index unavailable (low confidence)
        500: unexpected error (low confidence)
    """
    try:
        if not sku:
            raise MissingSKUError()

        token = get_access_token(authorization)

        request = SKUCheckRequest(
            sku=sku,
            exclude_product_id=exclude_product_id,
            exclude_variation_id=exclude_variation_id,
            check_disabled_variations=check_disabled_variations == "true",
            exclude_variation_sku=exclude_variation_sku or None
        )

        result = get_sku_service().check_availability(token, request)
        return JSONResponse(content=result.to_wire())

    except (MissingSKUError, AuthenticationError) as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})

    except UpstreamStatusError as e:
        degraded = SKUCheckResult.degraded(f"Unable to verify SKU availability: {e.reason}")
        return JSONResponse(status_code=e.upstream_status, content=degraded.to_wire())

    except Exception as e:
        logger.error(
            "check_sku_failed",
            sku=sku,
            error=str(e),
            error_type=type(e).__name__
        )
        degraded = SKUCheckResult.degraded(str(e) or "Unknown error occurred")
        return JSONResponse(status_code=500, content=degraded.to_wire())


@router.get("/categories")
async def list_categories(authorization: Optional[str] = Header(None)):
    """All product categories (every page)."""
    try:
        token = get_access_token(authorization)
        return get_store_service().get_categories(token)

    except Exception as e:
        return handle_error(e)


@router.get("/attributes")
async def list_attributes(authorization: Optional[str] = Header(None)):
    """Global product attributes."""
    try:
        token = get_access_token(authorization)
        return get_store_service().get_attributes(token)

    except Exception as e:
        return handle_error(e)
