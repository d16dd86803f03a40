"""
Document download endpoints.

This module streams buffered file content:
- The book PDF
- The cover image, with its sniffed image type
"""

import io
from typing import Dict

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.models.schemas import DOCUMENT_ERROR_RESPONSES
from app.services.document import DocumentService
from .common import (
    get_document_service,
    get_user_context,
    log_operation_success,
)

router = APIRouter()


def _binary_response(content: bytes, media_type: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={
            "Content-Disposition": f'inline; filename="{filename}"',
            "Content-Length": str(len(content)),
        },
    )


@router.get(
    "/files/{document_id}/pdf",
    summary="Get Book PDF",
    operation_id="getFilePdf",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "PDF bytes"},
        **DOCUMENT_ERROR_RESPONSES,
    },
)
async def get_file_pdf(
    document_id: str,
    user_context: Dict[str, str] = Depends(get_user_context),
    document_service: DocumentService = Depends(get_document_service),
):
    """Stream a book's PDF."""
    content = await document_service.get_pdf_bytes(document_id)

    log_operation_success(
        "PDF download", document_id=document_id, size=len(content), **user_context
    )
    return _binary_response(content, "application/pdf", f"{document_id}.pdf")


@router.get(
    "/files/{document_id}/cover",
    summary="Get Book Cover",
    operation_id="getFileCover",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"image/*": {}}, "description": "Cover image bytes"},
        **DOCUMENT_ERROR_RESPONSES,
    },
)
async def get_file_cover(
    document_id: str,
    user_context: Dict[str, str] = Depends(get_user_context),
    document_service: DocumentService = Depends(get_document_service),
):
    """Stream a book's cover image."""
    content = await document_service.get_cover_bytes(document_id)
    media_type = document_service.detect_image_type(content)

    log_operation_success(
        "Cover download", document_id=document_id, size=len(content), **user_context
    )
    extension = media_type.split("/")[-1]
    return _binary_response(content, media_type, f"{document_id}.{extension}")
