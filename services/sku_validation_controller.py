"""
Debounced SKU validation for one input field.

    IDLE -> DEBOUNCING -> VALIDATING -> VALID | INVALID | INDETERMINATE
      ^_________|  (any new value restarts the quiet period)

Only the most recently issued request may change what the field shows.
Each request gets a token; a result whose token is no longer current is
dropped, whether or not the transport honoured the cancellation.

All methods must be called from the event loop that owns the field.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Optional
import structlog

from config import settings
from models.sku import SKUCheckResult, Confidence, allow_submission
from services.sku_client import SKUCheckClient
from utils.sku_generator import generate_unique_sku, generate_simple_sku

logger = structlog.get_logger(__name__)


CHECKING_MESSAGE = "Checking SKU availability…"
AVAILABLE_MESSAGE = "SKU is available"
TAKEN_MESSAGE = "SKU is already taken. Please choose a different one."
INDETERMINATE_MESSAGE = "Unable to validate SKU"

Checker = Callable[..., Awaitable[SKUCheckResult]]


class ValidationState(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"
    INDETERMINATE = "indeterminate"


def threaded_checker(client: SKUCheckClient) -> Checker:
    """
    Adapt the blocking client to the controller.

    A cancelled call keeps running in its worker thread; the controller
    ignores whatever it returns.
    """
    async def check(sku: str, **kwargs) -> SKUCheckResult:
        return await asyncio.to_thread(client.check_availability, sku, **kwargs)
    return check


class SKUValidationController:
    """
    Owns the validation state of a single SKU input.

    Args:
        checker: Async callable with the signature of
            SKUCheckClient.check_availability. Defaults to a threaded
            SKUCheckClient.
        product_id: Product being edited (excluded from conflicts)
        variation_id: Variation being edited (excluded from conflicts)
        current_variation_sku: The variation's own SKU, so its entry in the
            disabled variations ledger is not a conflict
        debounce_seconds: Quiet period (defaults to settings.sku_debounce_ms)
        on_validation_change: Called with whether the form may be submitted
    """

    def __init__(
        self,
        checker: Optional[Checker] = None,
        product_id: Optional[int] = None,
        variation_id: Optional[int] = None,
        current_variation_sku: Optional[str] = None,
        debounce_seconds: Optional[float] = None,
        on_validation_change: Optional[Callable[[bool], None]] = None
    ):
        self.checker = checker or threaded_checker(SKUCheckClient())
        self.product_id = product_id
        self.variation_id = variation_id
        self.current_variation_sku = current_variation_sku
        self.debounce_seconds = (
            settings.sku_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.on_validation_change = on_validation_change

        self.value = ""
        self.state = ValidationState.IDLE
        self.message = ""
        self.is_valid: Optional[bool] = None
        self.result: Optional[SKUCheckResult] = None
        self.can_submit = True

        self._debounce_task: Optional[asyncio.Task] = None
        self._request_task: Optional[asyncio.Task] = None
        self._token = 0
        self._closed = False

    @property
    def is_validating(self) -> bool:
        return self.state == ValidationState.VALIDATING

    # ===================
    # INPUT
    # ===================

    def set_value(self, value: str) -> None:
        """
        Record a new input value and restart the quiet period.

        Only the pending timer is cancelled; an in-flight request keeps
        running until the next request supersedes it.
        """
        if self._closed:
            return

        self.value = value
        if self._debounce_task is not None:
            self._debounce_task.cancel()

        self.state = ValidationState.DEBOUNCING
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounce())

    def generate(
        self,
        vendor_id: int,
        product_name: Optional[str] = None,
        simple: bool = False
    ) -> str:
        """
        Fill the field with a fresh candidate and validate it like typed input.

        simple=True uses the short vendorid-token form and ignores product_name.
        """
        if simple:
            candidate = generate_simple_sku(vendor_id)
        else:
            candidate = generate_unique_sku(vendor_id, product_name)
        logger.info("sku_candidate_generated", vendor_id=vendor_id, sku=candidate)
        self.set_value(candidate)
        return candidate

    async def _debounce(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._debounce_task = None
        self._on_quiet()

    def _on_quiet(self) -> None:
        sku = self.value.strip()

        # Supersede whatever is in flight, even when nothing new is sent
        self._cancel_request()

        if not sku:
            self._settle(ValidationState.IDLE, None, "", None)
            return

        token = self._token
        self.state = ValidationState.VALIDATING
        self.message = CHECKING_MESSAGE
        self._request_task = asyncio.get_running_loop().create_task(
            self._validate(token, sku)
        )

    # ===================
    # VALIDATION
    # ===================

    async def _validate(self, token: int, sku: str) -> None:
        logger.debug("sku_validation_started", sku=sku, token=token)
        try:
            result = await self.checker(
                sku,
                exclude_product_id=self.product_id,
                exclude_variation_id=self.variation_id,
                check_disabled_variations=True,
                exclude_variation_sku=self.current_variation_sku
            )
        except asyncio.CancelledError:
            logger.debug("sku_validation_cancelled", sku=sku, token=token)
            raise
        except Exception as e:
            if self._is_stale(token):
                return
            logger.error(
                "sku_validation_failed",
                sku=sku,
                error=str(e),
                error_type=type(e).__name__
            )
            self._settle(ValidationState.INDETERMINATE, None, INDETERMINATE_MESSAGE, None)
            return

        if self._is_stale(token):
            logger.debug("stale_sku_result_discarded", sku=sku, token=token)
            return

        self._apply(result)

    def _apply(self, result: SKUCheckResult) -> None:
        if result.confidence == Confidence.LOW:
            self._settle(ValidationState.INDETERMINATE, None, INDETERMINATE_MESSAGE, result)
        elif result.is_available:
            self._settle(ValidationState.VALID, True, AVAILABLE_MESSAGE, result)
        else:
            self._settle(ValidationState.INVALID, False, result.error or TAKEN_MESSAGE, result)

    def _settle(
        self,
        state: ValidationState,
        is_valid: Optional[bool],
        message: str,
        result: Optional[SKUCheckResult]
    ) -> None:
        self.state = state
        self.is_valid = is_valid
        self.message = message
        self.result = result
        self.can_submit = allow_submission(result)

        logger.debug("sku_validation_settled", state=state.value, sku=self.value)
        if self.on_validation_change is not None:
            self.on_validation_change(self.can_submit)

    def _is_stale(self, token: int) -> bool:
        return self._closed or token != self._token

    def _cancel_request(self) -> None:
        self._token += 1
        if self._request_task is not None and not self._request_task.done():
            self._request_task.cancel()
        self._request_task = None

    # ===================
    # LIFECYCLE
    # ===================

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no request is in flight."""
        while True:
            pending = [
                t for t in (self._debounce_task, self._request_task)
                if t is not None and not t.done()
            ]
            if not pending:
                return
            await asyncio.wait(pending)

    def close(self) -> None:
        """Tear down: drop the timer and the in-flight request, no more updates."""
        self._closed = True
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            self._debounce_task = None
        self._cancel_request()
