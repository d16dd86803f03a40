"""
Document Storage Service - GCS operations for PDFs and cover images.

Objects are written under time-based unique keys and never overwritten or
removed; replacing a file stores a new object and repoints the record.
"""

from app.core.exceptions import NotFoundError
from app.core.gcs_client import GCSObjectNotFoundError
from app.models.document import FilePayload
from .document_base_service import DocumentBaseService

PDF_CONTENT_TYPE = "application/pdf"


class DocumentStorageService(DocumentBaseService):
    """Service for object storage reads and writes."""

    async def store_pdf(self, payload: FilePayload) -> str:
        """Upload a PDF and return its public URL."""
        key = self.gcs.build_object_key(
            self.settings.PDF_UPLOAD_PREFIX, payload.filename
        )
        url = await self.gcs.upload_file_async(key, payload.content, PDF_CONTENT_TYPE)
        self.logger.info("Stored PDF", key=key, size=payload.size)
        return url

    async def store_cover(self, payload: FilePayload, content_type: str) -> str:
        """Upload a cover image and return its public URL."""
        key = self.gcs.build_object_key(
            self.settings.COVER_UPLOAD_PREFIX, payload.filename
        )
        url = await self.gcs.upload_file_async(key, payload.content, content_type)
        self.logger.info("Stored cover image", key=key, size=payload.size)
        return url

    async def fetch_by_url(self, url: str, not_found_message: str) -> bytes:
        """
        Download the object a stored public URL points to.

        Raises:
            NotFoundError: If the URL has no key or no object is stored there
        """
        key = self.gcs.key_from_url(url)
        if not key:
            raise NotFoundError(not_found_message)

        try:
            return await self.gcs.download_file_async(key)
        except GCSObjectNotFoundError:
            self.logger.warning("Stored object missing", key=key)
            raise NotFoundError(not_found_message)
