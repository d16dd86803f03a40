"""
Document Query Service - Catalog listing operations.

This service handles document listing:
- Full catalog listing behind the read-through list cache
- Documents purchased by a user (uncached)
"""

from typing import List

from sqlalchemy import select

from app.core.cache import CacheKeys
from app.models.db_models import DocumentModel, DocumentPurchaseModel
from app.models.document import Document
from app.models.identifiers import EntityId
from .document_base_service import DocumentBaseService


class DocumentQueryService(DocumentBaseService):
    """Service for document listing queries."""

    async def list_documents(self) -> List[Document]:
        """
        List every document in the catalog.

        Served from ``books:list:all`` when cached; otherwise read from the
        catalog and cached with the list TTL. Mutations invalidate the entry.
        """
        cache_key = CacheKeys.books_list()

        cached = await self.cache.get_json(cache_key)
        if cached is not None:
            self.logger.debug("Document list cache hit", count=len(cached))
            return [Document.model_validate(item) for item in cached]

        async with self.db.session() as session:
            stmt = select(DocumentModel).order_by(
                DocumentModel.created_at, DocumentModel.id
            )
            result = await session.execute(stmt)
            documents = [self._model_to_pydantic(m) for m in result.scalars().all()]

        await self.cache.set_json(
            cache_key,
            [self._to_cache(d) for d in documents],
            ttl=self.settings.CACHE_BOOKS_LIST_TTL,
        )

        self.logger.info("Listed documents from catalog", count=len(documents))
        return documents

    async def list_purchased_documents(self, user_id: str) -> List[Document]:
        """Documents whose paid set contains the user."""
        user_id = EntityId(user_id)

        async with self.db.session() as session:
            stmt = (
                select(DocumentModel)
                .where(
                    DocumentModel.purchases.any(
                        DocumentPurchaseModel.user_id == str(user_id)
                    )
                )
                .order_by(DocumentModel.created_at, DocumentModel.id)
            )
            result = await session.execute(stmt)
            documents = [self._model_to_pydantic(m) for m in result.scalars().all()]

        self.logger.info(
            "Listed purchased documents", user_id=user_id, count=len(documents)
        )
        return documents
