"""
Document API Router

This module aggregates the document-related endpoints organized in focused
sub-modules:

- document_upload.py: Book upload
- document_management.py: Listing, detail, update and delete
- document_download.py: PDF and cover streaming
- common.py: Shared utilities and dependencies
"""

from fastapi import APIRouter

from app.api.v1.documents_modules.document_upload import router as upload_router
from app.api.v1.documents_modules.document_management import router as management_router
from app.api.v1.documents_modules.document_download import router as download_router

router = APIRouter()

router.include_router(
    upload_router,
    tags=["Document Upload"],
)

# Specific /files/{id}/... paths before the generic /files/{id} routes
router.include_router(
    download_router,
    tags=["Document Download"],
)

router.include_router(
    management_router,
    tags=["Document Management"],
)
