"""
Document Base Service - Common utilities and shared functionality.

This service provides the foundation for all document services with:
- Injected catalog store, object store and cache handles
- Model conversion from SQLAlchemy rows to the Document model
- Record lookup and ownership checks
- Cache invalidation helpers
"""

from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheGateway
from app.core.config import Settings, settings as default_settings
from app.core.db_client import DatabaseManager
from app.core.exceptions import ForbiddenError, NotFoundError
from app.core.gcs_client import GCSClient
from app.core.logging import get_service_logger
from app.models.db_models import DocumentModel
from app.models.document import Document
from app.models.identifiers import EntityId


class DocumentBaseService:
    """Base service with common functionality shared across all document services."""

    def __init__(
        self,
        db: DatabaseManager,
        gcs: GCSClient,
        cache: CacheGateway,
        app_settings: Optional[Settings] = None,
    ):
        self.logger = get_service_logger("document")
        self.db = db
        self.gcs = gcs
        self.cache = cache
        self.settings = app_settings or default_settings

        # File constraints
        self.max_file_size = self.settings.MAX_FILE_SIZE

    @staticmethod
    def _model_to_pydantic(model: DocumentModel) -> Document:
        """Convert SQLAlchemy model to Pydantic model."""
        paid_users: List[EntityId] = []
        for purchase in model.purchases:
            user_id = EntityId(purchase.user_id)
            if user_id not in paid_users:
                paid_users.append(user_id)

        return Document(
            id=model.id,
            title=model.title,
            category=model.category,
            pdf_url=model.pdf_url,
            cover_image_url=model.cover_image_url,
            owner_id=model.owner_id,
            paid_users=paid_users,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_cache(document: Document) -> dict:
        return document.model_dump(mode="json", by_alias=True)

    async def _load_model(
        self, session: AsyncSession, document_id: str
    ) -> Optional[DocumentModel]:
        stmt = select(DocumentModel).where(DocumentModel.id == str(EntityId(document_id)))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_model_or_404(
        self, session: AsyncSession, document_id: str
    ) -> DocumentModel:
        model = await self._load_model(session, document_id)
        if model is None:
            raise NotFoundError("Book not found", resource_id=str(document_id))
        return model

    def _ensure_owner(self, model: DocumentModel, caller_id: str) -> None:
        """
        Raises:
            ForbiddenError: If the caller is not the document owner
        """
        if EntityId(model.owner_id) != EntityId(caller_id):
            self.logger.warning(
                "Ownership check failed",
                document_id=model.id,
                caller_id=str(caller_id),
            )
            raise ForbiddenError()

    async def _invalidate(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        await self.cache.delete_many(keys)
        self.logger.debug("Cache invalidated", keys=keys)
