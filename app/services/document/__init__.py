"""
Document services package.

Each service has a single responsibility; DocumentService composes them.

Services:
- document_base_service: Injected handles and shared helpers
- document_validation_service: Upload presence, size and content type checks
- document_storage_service: GCS operations
- document_crud_service: Basic CRUD operations
- document_query_service: Catalog and purchased listings
- document_download_service: Buffered file access behind the byte cache
- document_service: Orchestration facade (main interface)
"""

from .document_service import DocumentService

__all__ = [
    "DocumentService",
]
