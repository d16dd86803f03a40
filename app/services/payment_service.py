"""
Payment Service - order creation, signature verification and access grants.

Per (document, user) the flow is Unpaid -> OrderCreated -> Verified. Orders
live only at the gateway; the single durable effect of a verified payment is
a purchase row granting the user access to the document.
"""

import hashlib
import time
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, settings as default_settings
from app.core.db_client import DatabaseManager
from app.core.exceptions import AlreadyPaidError, NotFoundError, VerificationError
from app.core.logging import get_service_logger
from app.core.razorpay_client import RazorpayClient
from app.models.db_models import DocumentModel, DocumentPurchaseModel
from app.models.identifiers import EntityId

logger = get_service_logger("payment")


def build_receipt(document_id: str, user_id: str, now_ms: Optional[int] = None) -> str:
    """
    Merchant receipt id: ``rcpt_`` + 32 hex chars (37 total, gateway max is 40).
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    digest = hashlib.md5(f"{document_id}_{user_id}_{now_ms}".encode("utf-8"))
    return f"rcpt_{digest.hexdigest()[:32]}"


def _has_paid(model: DocumentModel, user_id: EntityId) -> bool:
    return any(EntityId(p.user_id) == user_id for p in model.purchases)


class PaymentService:
    """Service for the purchase flow."""

    def __init__(
        self,
        db: DatabaseManager,
        gateway: RazorpayClient,
        app_settings: Optional[Settings] = None,
    ):
        self.db = db
        self.gateway = gateway
        self.settings = app_settings or default_settings
        self.logger = logger

    async def _get_document_or_404(
        self, session: AsyncSession, document_id: EntityId
    ) -> DocumentModel:
        result = await session.execute(
            select(DocumentModel).where(DocumentModel.id == str(document_id))
        )
        model = result.scalar_one_or_none()
        if model is None:
            raise NotFoundError("Book not found", resource_id=str(document_id))
        return model

    async def create_order(self, document_id: str, user_id: str) -> Dict[str, Any]:
        """
        Create a gateway order for buying a document.

        Returns:
            The gateway's order object, unchanged

        Raises:
            NotFoundError: If the document does not exist
            AlreadyPaidError: If the user already has access
            ConfigurationError: If gateway credentials are missing
            PaymentGatewayError: If the gateway rejects the order
        """
        document_id = EntityId(document_id)
        user_id = EntityId(user_id)

        async with self.db.session() as session:
            model = await self._get_document_or_404(session, document_id)
            already_paid = _has_paid(model, user_id)

        if already_paid:
            self.logger.info(
                "Order rejected: already purchased",
                document_id=document_id,
                user_id=user_id,
            )
            raise AlreadyPaidError()

        receipt = build_receipt(document_id, user_id)
        order = await self.gateway.create_order(
            amount=self.settings.BOOK_PRICE,
            currency=self.settings.PAYMENT_CURRENCY,
            receipt=receipt,
            notes={"bookId": str(document_id), "userId": str(user_id)},
        )

        self.logger.info(
            "Payment order created",
            document_id=document_id,
            user_id=user_id,
            order_id=order.get("id"),
        )
        return order

    async def verify_payment(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
        document_id: str,
        user_id: str,
    ) -> None:
        """
        Verify a completed payment and grant access.

        Granting is idempotent: a user already in the paid set is not added
        again. Cached document copies are left as they are.

        Raises:
            VerificationError: If the signature does not match
            NotFoundError: If the document does not exist
            ConfigurationError: If the gateway secret is missing
        """
        document_id = EntityId(document_id)
        user_id = EntityId(user_id)

        if not self.gateway.verify_payment_signature(order_id, payment_id, signature):
            self.logger.warning(
                "Payment signature mismatch",
                order_id=order_id,
                document_id=document_id,
                user_id=user_id,
            )
            raise VerificationError()

        async with self.db.session() as session:
            model = await self._get_document_or_404(session, document_id)

            if _has_paid(model, user_id):
                self.logger.info(
                    "Payment already recorded",
                    document_id=document_id,
                    user_id=user_id,
                )
                return

            session.add(
                DocumentPurchaseModel(document_id=model.id, user_id=str(user_id))
            )

        self.logger.info(
            "Payment verified",
            order_id=order_id,
            payment_id=payment_id,
            document_id=document_id,
            user_id=user_id,
        )

    async def check_status(self, document_id: str, user_id: str) -> bool:
        """
        Whether the user has paid for the document.

        Raises:
            NotFoundError: If the document does not exist
        """
        document_id = EntityId(document_id)
        user_id = EntityId(user_id)

        async with self.db.session() as session:
            model = await self._get_document_or_404(session, document_id)
            return _has_paid(model, user_id)
