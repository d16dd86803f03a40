import hashlib
import hmac
from typing import Any, Dict, Optional

import httpx

from app.core.config import Settings
from app.core.exceptions import ConfigurationError, PaymentGatewayError
from app.core.logging import get_service_logger

logger = get_service_logger("razorpay_client")

PLACEHOLDER_KEY_ID = "your_razorpay_key_id"
PLACEHOLDER_KEY_SECRET = "your_razorpay_key_secret"


class RazorpayClient:
    """Async client for the Razorpay Orders API and payment signatures."""

    def __init__(
        self,
        key_id: Optional[str],
        key_secret: Optional[str],
        base_url: str = "https://api.razorpay.com/v1",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self._key_id = key_id
        self._key_secret = key_secret
        self._base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls, app_settings: Settings, http_client: Optional[httpx.AsyncClient] = None
    ) -> "RazorpayClient":
        return cls(
            key_id=app_settings.RAZORPAY_KEY_ID,
            key_secret=app_settings.RAZORPAY_KEY_SECRET,
            base_url=app_settings.RAZORPAY_API_BASE_URL,
            http_client=http_client,
        )

    @property
    def is_configured(self) -> bool:
        """True when real (non-placeholder) credentials are present."""
        return bool(
            self._key_id
            and self._key_secret
            and self._key_id != PLACEHOLDER_KEY_ID
            and self._key_secret != PLACEHOLDER_KEY_SECRET
        )

    def ensure_configured(self) -> None:
        if not self.is_configured:
            raise ConfigurationError(
                "Razorpay keys not configured. Please add RAZORPAY_KEY_ID "
                "and RAZORPAY_KEY_SECRET to the environment"
            )

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Create a payment order.

        Args:
            amount: Amount in the currency's smallest unit
            currency: ISO currency code
            receipt: Merchant receipt id (max 40 chars)
            notes: Free-form key/value notes stored with the order

        Returns:
            The gateway's order object, unchanged

        Raises:
            ConfigurationError: Credentials missing or placeholders
            PaymentGatewayError: Gateway rejected the request or was unreachable
        """
        self.ensure_configured()

        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }

        try:
            response = await self._client.post(
                f"{self._base_url}/orders",
                json=payload,
                auth=(self._key_id, self._key_secret),
            )
        except httpx.HTTPError as e:
            logger.error("Razorpay order request failed", error=str(e))
            raise PaymentGatewayError(f"Payment initialization failed: {e}")

        if response.is_success:
            order = response.json()
            logger.info(
                "Razorpay order created",
                order_id=order.get("id"),
                receipt=receipt,
                amount=amount,
            )
            return order

        error_body: Dict[str, Any] = {}
        try:
            error_body = response.json().get("error") or {}
        except ValueError:
            pass

        message = error_body.get("description") or "Payment initialization failed"
        logger.error(
            "Razorpay order creation error",
            status_code=response.status_code,
            error=error_body,
        )
        raise PaymentGatewayError(message, details={"gateway_error": error_body})

    def expected_signature(self, order_id: str, payment_id: str) -> str:
        """Hex HMAC-SHA256 of ``"<order_id>|<payment_id>"`` under the key secret."""
        if not self._key_secret:
            raise ConfigurationError("RAZORPAY_KEY_SECRET is not configured")
        message = f"{order_id}|{payment_id}".encode("utf-8")
        return hmac.new(
            self._key_secret.encode("utf-8"), message, hashlib.sha256
        ).hexdigest()

    def verify_payment_signature(
        self, order_id: str, payment_id: str, signature: str
    ) -> bool:
        expected = self.expected_signature(order_id, payment_id)
        # compare_digest rejects non-ASCII str, so compare bytes
        return hmac.compare_digest(
            expected.encode("ascii"), (signature or "").encode("utf-8")
        )

    async def close(self) -> None:
        await self._client.aclose()
