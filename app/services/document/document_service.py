"""
Document Service - Main orchestration facade for catalog operations.

This service acts as the main facade for all document operations, composing
specialized services behind one interface used by the API layer.

The service delegates operations to specialized services:
- DocumentValidationService: Upload presence, size and content type checks
- DocumentStorageService: GCS reads and writes
- DocumentCrudService: Create, read, update, delete operations
- DocumentQueryService: Catalog and purchased listings
- DocumentDownloadService: Buffered PDF and cover downloads
"""

from typing import List, Optional

from app.core.cache import CacheGateway
from app.core.config import Settings
from app.core.db_client import DatabaseManager
from app.core.gcs_client import GCSClient
from app.models.document import Document, FilePayload

from .document_base_service import DocumentBaseService
from .document_validation_service import DocumentValidationService
from .document_storage_service import DocumentStorageService
from .document_crud_service import DocumentCrudService
from .document_query_service import DocumentQueryService
from .document_download_service import DocumentDownloadService


class DocumentService(DocumentBaseService):
    """
    Main document service implementing facade pattern.

    All specialized services share the same injected handles.
    """

    def __init__(
        self,
        db: DatabaseManager,
        gcs: GCSClient,
        cache: CacheGateway,
        app_settings: Optional[Settings] = None,
    ):
        super().__init__(db, gcs, cache, app_settings)

        deps = (db, gcs, cache, self.settings)
        self.validation_service = DocumentValidationService(*deps)
        self.storage_service = DocumentStorageService(*deps)
        self.crud_service = DocumentCrudService(*deps)
        self.query_service = DocumentQueryService(*deps)
        self.download_service = DocumentDownloadService(*deps)

    # ========================================
    # DELEGATED CRUD METHODS
    # ========================================

    async def upload_document(
        self,
        title: Optional[str],
        category: Optional[str],
        pdf_file: Optional[FilePayload],
        cover_file: Optional[FilePayload],
        owner_id: str,
    ) -> Document:
        """Delegate to CRUD service."""
        return await self.crud_service.create_document(
            title=title,
            category=category,
            pdf_file=pdf_file,
            cover_file=cover_file,
            owner_id=owner_id,
            validation_service=self.validation_service,
            storage_service=self.storage_service,
        )

    async def get_document(self, document_id: str) -> Document:
        """Delegate to CRUD service."""
        return await self.crud_service.get_document(document_id)

    async def update_document(
        self,
        document_id: str,
        caller_id: str,
        title: Optional[str] = None,
        category: Optional[str] = None,
        pdf_file: Optional[FilePayload] = None,
        cover_file: Optional[FilePayload] = None,
    ) -> Document:
        """Delegate to CRUD service."""
        return await self.crud_service.update_document(
            document_id=document_id,
            caller_id=caller_id,
            title=title,
            category=category,
            pdf_file=pdf_file,
            cover_file=cover_file,
            validation_service=self.validation_service,
            storage_service=self.storage_service,
        )

    async def delete_document(self, document_id: str, caller_id: str) -> None:
        """Delegate to CRUD service."""
        await self.crud_service.delete_document(document_id, caller_id)

    # ========================================
    # DELEGATED QUERY METHODS
    # ========================================

    async def list_documents(self) -> List[Document]:
        """Delegate to query service."""
        return await self.query_service.list_documents()

    async def list_purchased_documents(self, user_id: str) -> List[Document]:
        """Delegate to query service."""
        return await self.query_service.list_purchased_documents(user_id)

    # ========================================
    # DELEGATED DOWNLOAD METHODS
    # ========================================

    async def get_pdf_bytes(self, document_id: str) -> bytes:
        """Delegate to download service."""
        return await self.download_service.get_pdf_bytes(
            document_id,
            crud_service=self.crud_service,
            storage_service=self.storage_service,
        )

    async def get_cover_bytes(self, document_id: str) -> bytes:
        """Delegate to download service."""
        return await self.download_service.get_cover_bytes(
            document_id,
            crud_service=self.crud_service,
            storage_service=self.storage_service,
        )

    def detect_image_type(self, content: bytes) -> str:
        """Delegate to validation service."""
        return self.validation_service.detect_image_type(content)
