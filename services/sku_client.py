"""
Client for the check-sku proxy endpoint.

This is what form code calls. check_availability and get_sku_details never
raise for a failed check: a transport error, a non-success answer or a body
that is not a check result becomes a low-confidence result, and
allow_submission() lets the form through. get_product_by_sku raises
ExternalServiceError instead.
"""

from typing import Optional
import requests
import structlog

from config import settings
from models.sku import SKUCheckResult, ExistingProduct
from exceptions import ExternalServiceError

logger = structlog.get_logger(__name__)


class SKUCheckClient:
    """
    Calls GET /api/products/check-sku.

    Args:
        url: Full URL of the check-sku endpoint
        token: Bearer token forwarded to the endpoint
        session: Optional requests.Session (shared connections, tests)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None
    ):
        self.url = url or settings.sku_check_url
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, params: dict[str, str]) -> requests.Response:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return self.session.get(
            self.url,
            params=params,
            headers=headers,
            timeout=self.timeout
        )

    @staticmethod
    def _error_from(response: requests.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        return body.get("error") if isinstance(body, dict) else None

    @staticmethod
    def _parse(response: requests.Response) -> SKUCheckResult:
        """
        Raises:
            ValueError: If the body is not JSON or not a check result
        """
        return SKUCheckResult.model_validate(response.json())

    def check_availability(
        self,
        sku: str,
        exclude_product_id: Optional[int] = None,
        exclude_variation_id: Optional[int] = None,
        check_disabled_variations: bool = False,
        exclude_variation_sku: Optional[str] = None
    ) -> SKUCheckResult:
        """
        Check whether an SKU is free, excluding the record being edited.

        Returns:
            SKUCheckResult; confidence is low when the check failed
        """
        params = {"sku": sku}
        if exclude_product_id:
            params["excludeProductId"] = str(exclude_product_id)
        if exclude_variation_id:
            params["excludeVariationId"] = str(exclude_variation_id)
        if check_disabled_variations:
            params["checkDisabledVariations"] = "true"
        if exclude_variation_sku:
            params["excludeVariationSku"] = exclude_variation_sku

        try:
            response = self._get(params)
        except requests.exceptions.RequestException as e:
            logger.error("sku_check_request_failed", sku=sku, error=str(e))
            return SKUCheckResult.degraded(str(e))

        if not response.ok:
            logger.error(
                "sku_check_failed",
                sku=sku,
                status=response.status_code,
                reason=response.reason
            )
            return SKUCheckResult.degraded(
                self._error_from(response)
                or f"Unable to verify SKU availability: {response.reason}"
            )

        try:
            return self._parse(response)
        except ValueError as e:
            logger.error("sku_check_unreadable", sku=sku, error=str(e))
            return SKUCheckResult.degraded(f"Unable to verify SKU availability: {e}")

    def get_sku_details(self, sku: str) -> SKUCheckResult:
        """
        Availability of an SKU with no exclusions.

        Assumes available (low confidence) when the lookup fails.
        """
        try:
            response = self._get({"sku": sku})
        except requests.exceptions.RequestException as e:
            logger.error("sku_details_request_failed", sku=sku, error=str(e))
            return SKUCheckResult.degraded(str(e), is_available=True)

        if not response.ok:
            logger.error("sku_details_failed", sku=sku, status=response.status_code)
            return SKUCheckResult.degraded(
                self._error_from(response) or response.reason,
                is_available=True
            )

        try:
            return self._parse(response)
        except ValueError as e:
            logger.error("sku_details_unreadable", sku=sku, error=str(e))
            return SKUCheckResult.degraded(str(e), is_available=True)

    def get_product_by_sku(self, sku: str) -> Optional[ExistingProduct]:
        """
        Record currently holding an SKU, if any.

        Raises:
            ExternalServiceError: If the endpoint answered non-success or
                the body is not a check result
        """
        response = self._get({"sku": sku})
        if not response.ok:
            raise ExternalServiceError(
                "sku_check",
                f"Failed to get product by SKU: {response.status_code} {response.reason}",
                details={"sku": sku, "status": response.status_code}
            )

        try:
            result = self._parse(response)
        except ValueError as e:
            raise ExternalServiceError(
                "sku_check",
                f"Unreadable response for SKU: {e}",
                details={"sku": sku, "status": response.status_code}
            ) from e
        if not result.is_available and result.existing_product:
            return result.existing_product
        return None
