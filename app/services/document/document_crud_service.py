"""
Document CRUD Service - Basic CRUD operations for document lifecycle management.

This service handles core document lifecycle operations:
- Document creation (two object uploads, then one catalog insert)
- Document retrieval with a read-through detail cache
- Owner-only metadata updates and file replacement
- Owner-only deletion with cache invalidation
"""

from datetime import datetime, timezone
from typing import List, Optional

from app.core.cache import CacheKeys
from app.models.db_models import DocumentModel
from app.models.document import Document, FilePayload
from app.models.identifiers import EntityId
from .document_base_service import DocumentBaseService


class DocumentCrudService(DocumentBaseService):
    """Service for basic document CRUD operations."""

    async def create_document(
        self,
        title: Optional[str],
        category: Optional[str],
        pdf_file: Optional[FilePayload],
        cover_file: Optional[FilePayload],
        owner_id: str,
        validation_service=None,
        storage_service=None,
    ) -> Document:
        """
        Upload both files and create the catalog record.

        Args:
            title: Book title
            category: Book category
            pdf_file: PDF payload
            cover_file: Cover image payload
            owner_id: ID of the uploading user
            validation_service: Validation service dependency
            storage_service: Storage service dependency

        Returns:
            The created document

        Raises:
            ValidationError: If a payload is missing or too large, or metadata is empty
        """
        validation_service.validate_required_uploads(pdf_file, cover_file)
        validation_service.validate_metadata(title, category)
        validation_service.validate_file_size(pdf_file)
        validation_service.validate_file_size(cover_file)

        pdf_url = await storage_service.store_pdf(pdf_file)
        cover_url = await storage_service.store_cover(
            cover_file, validation_service.cover_content_type(cover_file)
        )

        async with self.db.session() as session:
            model = DocumentModel(
                id=str(EntityId.new()),
                title=title.strip(),
                category=category.strip(),
                pdf_url=pdf_url,
                cover_image_url=cover_url,
                owner_id=str(EntityId(owner_id)),
                purchases=[],
            )
            session.add(model)
            await session.flush()
            document = self._model_to_pydantic(model)

        await self._invalidate([CacheKeys.books_list()])

        self.logger.info(
            "Document created",
            document_id=document.id,
            owner_id=document.owner_id,
            title=document.title,
        )
        return document

    async def get_document(self, document_id: str) -> Document:
        """
        Get a document by ID, read-through the detail cache.

        Raises:
            NotFoundError: If no such document exists
        """
        document_id = EntityId(document_id)
        cache_key = CacheKeys.book_detail(document_id)

        cached = await self.cache.get_json(cache_key)
        if cached is not None:
            self.logger.debug("Document detail cache hit", document_id=document_id)
            return Document.model_validate(cached)

        async with self.db.session() as session:
            model = await self._get_model_or_404(session, document_id)
            document = self._model_to_pydantic(model)

        await self.cache.set_json(
            cache_key,
            self._to_cache(document),
            ttl=self.settings.CACHE_BOOK_DETAIL_TTL,
        )
        return document

    async def update_document(
        self,
        document_id: str,
        caller_id: str,
        title: Optional[str] = None,
        category: Optional[str] = None,
        pdf_file: Optional[FilePayload] = None,
        cover_file: Optional[FilePayload] = None,
        validation_service=None,
        storage_service=None,
    ) -> Document:
        """
        Update metadata and/or replace files. Owner only.

        Empty title/category values leave the field unchanged. Each provided
        file is stored under a fresh key and the record repointed to it.

        Raises:
            NotFoundError: If no such document exists
            ForbiddenError: If the caller is not the owner
            ValidationError: If a replacement file is too large
        """
        document_id = EntityId(document_id)

        async with self.db.session() as session:
            model = await self._get_model_or_404(session, document_id)
            self._ensure_owner(model, caller_id)

            for payload in (pdf_file, cover_file):
                if payload is not None:
                    validation_service.validate_file_size(payload)

            if title and title.strip():
                model.title = title.strip()
            if category and category.strip():
                model.category = category.strip()

            if pdf_file is not None:
                model.pdf_url = await storage_service.store_pdf(pdf_file)
            if cover_file is not None:
                model.cover_image_url = await storage_service.store_cover(
                    cover_file, validation_service.cover_content_type(cover_file)
                )

            model.updated_at = datetime.now(timezone.utc)
            await session.flush()
            document = self._model_to_pydantic(model)

        keys: List[str] = [CacheKeys.books_list(), CacheKeys.book_detail(document_id)]
        if pdf_file is not None:
            keys.append(CacheKeys.pdf_file(document_id))
        if cover_file is not None:
            keys.append(CacheKeys.cover_image(document_id))
        await self._invalidate(keys)

        self.logger.info(
            "Document updated",
            document_id=document_id,
            replaced_pdf=pdf_file is not None,
            replaced_cover=cover_file is not None,
        )
        return document

    async def delete_document(self, document_id: str, caller_id: str) -> None:
        """
        Delete a document and its purchase rows. Owner only.

        Raises:
            NotFoundError: If no such document exists
            ForbiddenError: If the caller is not the owner
        """
        document_id = EntityId(document_id)

        async with self.db.session() as session:
            model = await self._get_model_or_404(session, document_id)
            self._ensure_owner(model, caller_id)
            await session.delete(model)

        await self._invalidate(
            [
                CacheKeys.books_list(),
                CacheKeys.book_detail(document_id),
                CacheKeys.pdf_file(document_id),
                CacheKeys.cover_image(document_id),
            ]
        )

        self.logger.info("Document deleted", document_id=document_id)

