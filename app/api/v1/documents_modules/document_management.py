"""
Document management endpoints.

This module handles catalog operations:
- Listing all documents and the caller's purchased documents
- Document detail
- Owner-only update (metadata and/or file replacement) and delete
"""

from typing import Dict, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.models.schemas import (
    AckResponse,
    DocumentListResponse,
    DocumentResponse,
    COMMON_ERROR_RESPONSES,
    DOCUMENT_ERROR_RESPONSES,
)
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


@router.get(
    "/get-files",
    response_model=DocumentListResponse,
    summary="List Books",
    operation_id="getFiles",
    responses=COMMON_ERROR_RESPONSES,
)
async def get_files(
    user_context: Dict[str, str] = Depends(get_user_context),
    document_service: DocumentService = Depends(get_document_service),
):
    """List every book in the catalog."""
    documents = await document_service.list_documents()
    return DocumentListResponse(data=documents)


@router.get(
    "/purchased-books",
    response_model=DocumentListResponse,
    summary="List Purchased Books",
    operation_id="getPurchasedBooks",
    responses=COMMON_ERROR_RESPONSES,
)
async def get_purchased_books(
    user_context: Dict[str, str] = Depends(get_user_context),
    document_service: DocumentService = Depends(get_document_service),
):
    """List the books the caller has paid for."""
    documents = await document_service.list_purchased_documents(
        user_context["user_id"]
    )
    return DocumentListResponse(data=documents)


@router.get(
    "/files/{document_id}",
    response_model=DocumentResponse,
    summary="Get Book",
    operation_id="getFile",
    responses=DOCUMENT_ERROR_RESPONSES,
)
async def get_file(
    document_id: str,
    user_context: Dict[str, str] = Depends(get_user_context),
    document_service: DocumentService = Depends(get_document_service),
):
    """Get one book's catalog record."""
    document = await document_service.get_document(document_id)
    return DocumentResponse(data=document)


@router.put(
    "/files/{document_id}",
    response_model=DocumentResponse,
    summary="Update Book",
    operation_id="updateFile",
    description="""Update title/category and/or replace the PDF or cover image.

Only the owner may update. Empty fields are left unchanged; each provided
file replaces the current one.""",
    responses=DOCUMENT_ERROR_RESPONSES,
)
async def update_file(
    document_id: str,
    title: Optional[str] = Form(None, description="New title"),
    category: Optional[str] = Form(None, description="New category"),
    file: Optional[UploadFile] = File(None, description="Replacement PDF"),
    coverImage: Optional[UploadFile] = File(None, description="Replacement cover"),
    user_context: Dict[str, str] = Depends(get_user_context),
    document_service: DocumentService = Depends(get_document_service),
):
    """Update a book. Owner only."""
    log_operation_start("Document update", document_id=document_id, **user_context)

    try:
        pdf_payload = await read_upload(file, document_service.max_file_size)
        cover_payload = await read_upload(coverImage, document_service.max_file_size)

        document = await document_service.update_document(
            document_id=document_id,
            caller_id=user_context["user_id"],
            title=title,
            category=category,
            pdf_file=pdf_payload,
            cover_file=cover_payload,
        )
    finally:
        await release_uploads(file, coverImage)

    log_operation_success("Document update", document_id=document_id, **user_context)

    return DocumentResponse(data=document)


@router.delete(
    "/files/{document_id}",
    response_model=AckResponse,
    summary="Delete Book",
    operation_id="deleteFile",
    responses=DOCUMENT_ERROR_RESPONSES,
)
async def delete_file(
    document_id: str,
    user_context: Dict[str, str] = Depends(get_user_context),
    document_service: DocumentService = Depends(get_document_service),
):
    """Delete a book. Owner only."""
    log_operation_start("Document deletion", document_id=document_id, **user_context)

    await document_service.delete_document(document_id, user_context["user_id"])

    log_operation_success(
        "Document deletion", document_id=document_id, **user_context
    )
    return AckResponse(message="Deleted")
