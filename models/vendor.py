"""
Vendor (store) schemas.
"""

from pydantic import Field, ConfigDict
from typing import Any, Optional

from models.base import BaseSchema


class VendorInfo(BaseSchema):
    """
    Vendor profile as shown in the dashboard.

    Built from the store's /vendor record; unknown upstream keys are kept.
    """

    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    id: int = Field(0, description="Vendor ID (used as SKU prefix)")
    name: str = Field("Store", description="Display name")
    store_name: Optional[str] = None
    shop_name: Optional[str] = None
    display_name: Optional[str] = None
    email: str = ""
    description: str = ""
    address: str = ""
    phone: str = ""
    website: str = ""

    @classmethod
    def from_upstream(cls, data: dict[str, Any]) -> "VendorInfo":
        """
        Shape a raw /vendor payload.

        Upstream keys win over the derived fields, matching what the
        dashboard has always displayed.
        """
        address = data.get("address")
        street = address.get("street_1", "") if isinstance(address, dict) else ""
        store_name = data.get("store_name")

        shaped = {
            "id": data.get("id") or 0,
            "name": store_name or "Store",
            "store_name": store_name,
            "shop_name": store_name,
            "display_name": store_name,
            "email": data.get("email") or "",
            "description": data.get("description") or "",
            "address": street or "",
            "phone": data.get("phone") or "",
            "website": data.get("store_url") or "",
        }
        # Raw address object would clobber the flattened street line
        extra = {k: v for k, v in data.items() if k != "address" and v is not None}
        return cls(**{**shaped, **extra})
