"""
Vendor API routes.
"""

from fastapi import APIRouter, Header
from typing import Optional
import structlog

from models.vendor import VendorInfo
from services.auth_service import get_access_token
from services.store_service import get_store_service
from routes.products import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/info", response_model=VendorInfo)
async def get_vendor_info(authorization: Optional[str] = Header(None)):
    """
    Current vendor's profile.

    The vendor ID returned here prefixes generated SKUs.

    Raises:
        401: no bearer credential
        upstream status: store lookup failed
    """
    try:
        token = get_access_token(authorization)
        return get_store_service().get_vendor_info(token)

    except Exception as e:
        return handle_error(e)
