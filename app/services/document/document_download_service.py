"""
Document Download Service - Buffered file access behind the byte cache.

PDF and cover bytes are served from ``books:pdf:<id>`` / ``books:cover:<id>``
when cached. On a miss the record is resolved, the object key is derived
from the stored URL, and the object is downloaded in full and cached.
"""

from typing import Optional

from app.core.cache import CacheKeys
from app.core.exceptions import NotFoundError
from app.models.identifiers import EntityId
from .document_base_service import DocumentBaseService


class DocumentDownloadService(DocumentBaseService):
    """Service for document file downloads."""

    async def _get_file_bytes(
        self,
        document_id: str,
        cache_key: str,
        ttl: int,
        url_attr: str,
        not_found_message: str,
        crud_service,
        storage_service,
    ) -> bytes:
        cached = await self.cache.get_bytes(cache_key)
        if cached is not None:
            self.logger.debug("File cache hit", cache_key=cache_key, size=len(cached))
            return cached

        document = await crud_service.get_document(document_id)
        url: Optional[str] = getattr(document, url_attr)
        if not url:
            raise NotFoundError(not_found_message, resource_id=str(document_id))

        content = await storage_service.fetch_by_url(url, not_found_message)

        await self.cache.set_bytes(cache_key, content, ttl=ttl)
        return content

    async def get_pdf_bytes(
        self, document_id: str, crud_service=None, storage_service=None
    ) -> bytes:
        """
        Get the full PDF for a document.

        Raises:
            NotFoundError: If the document, its PDF URL or the stored object is missing
        """
        document_id = EntityId(document_id)
        return await self._get_file_bytes(
            document_id,
            CacheKeys.pdf_file(document_id),
            self.settings.CACHE_PDF_FILE_TTL,
            "pdf_url",
            "PDF not found",
            crud_service,
            storage_service,
        )

    async def get_cover_bytes(
        self, document_id: str, crud_service=None, storage_service=None
    ) -> bytes:
        """
        Get the full cover image for a document.

        Raises:
            NotFoundError: If the document, its cover URL or the stored object is missing
        """
        document_id = EntityId(document_id)
        return await self._get_file_bytes(
            document_id,
            CacheKeys.cover_image(document_id),
            self.settings.CACHE_BOOK_DETAIL_TTL,
            "cover_image_url",
            "Cover image not found",
            crud_service,
            storage_service,
        )
