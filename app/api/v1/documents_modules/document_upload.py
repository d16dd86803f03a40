"""
Document upload endpoints.

This module handles document upload operations, focusing on:
- Multipart parsing of the title, category, PDF and cover image parts
- Delegation to the document service for validation and storage
- Release of spooled upload files whatever the outcome
"""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.models.schemas import DocumentResponse, DOCUMENT_ERROR_RESPONSES
from app.services.document import DocumentService
from .common import (
    get_document_service,
    get_user_context,
    log_operation_start,
    log_operation_success,
    read_upload,
    release_uploads,
)

router = APIRouter()


@router.post(
    "/upload-files",
    response_model=DocumentResponse,
    summary="Upload Book",
    operation_id="uploadFiles",
    description="""Upload a book: PDF plus cover image, with title and category.

**Form fields:**
- **title**: Book title
- **category**: Book category
- **file**: PDF file
- **coverImage**: Cover image

**Authentication Required:** `Authorization: Bearer <token>` header

**Error Responses:**
- **400 Bad Request**: Missing file or image, empty title/category, or file too large
- **401 Unauthorized**: Missing or invalid token
- **500 Internal Server Error**: Storage or database error""",
    responses=DOCUMENT_ERROR_RESPONSES,
)
async def upload_files(
    title: Optional[str] = Form(None, description="Book title"),
    category: Optional[str] = Form(None, description="Book category"),
    file: Optional[UploadFile] = File(None, description="PDF file"),
    coverImage: Optional[UploadFile] = File(None, description="Cover image"),
    user_context: Dict[str, str] = Depends(get_user_context),
    document_service: DocumentService = Depends(get_document_service),
):
    """Upload a new book and create its catalog record."""
    log_operation_start(
        "Document upload",
        title=title,
        category=category,
        pdf_filename=file.filename if file else None,
        cover_filename=coverImage.filename if coverImage else None,
        **user_context,
    )

    try:
        pdf_payload = await read_upload(file, document_service.max_file_size)
        cover_payload = await read_upload(coverImage, document_service.max_file_size)

        document = await document_service.upload_document(
            title=title,
            category=category,
            pdf_file=pdf_payload,
            cover_file=cover_payload,
            owner_id=user_context["user_id"],
        )
    finally:
        await release_uploads(file, coverImage)

    log_operation_success("Document upload", document_id=document.id, **user_context)

    return DocumentResponse(data=document)
