"""
Shared utilities and dependencies for document API endpoints.

This module provides common functionality used across the document router
modules: service lookup, caller context, multipart payload handling and
consistent operation logging.
"""

from typing import Any, Dict, Optional

from fastapi import Depends, Request, UploadFile

from app.core.logging import get_api_logger
from app.core.security import get_current_user
from app.models.document import FilePayload
from app.services.document import DocumentService

# Shared logger instance
logger = get_api_logger()


def get_document_service(request: Request) -> DocumentService:
    """Document service from the process-wide container."""
    return request.app.state.services.document_service


async def get_user_context(
    current_user: Dict[str, Any] = Depends(get_current_user),
) -> Dict[str, str]:
    """Extract user context information."""
    return {"user_id": current_user["user_id"]}


async def read_upload(
    file: Optional[UploadFile], max_size: Optional[int] = None
) -> Optional[FilePayload]:
    """
    Buffer a multipart file part.

    A part with no filename (an empty file input) counts as absent. A part
    whose spooled size already exceeds ``max_size`` is not read; the payload
    carries its size only, so validation rejects it in the usual order.
    """
    if file is None or not file.filename:
        return None

    if max_size is not None and file.size is not None and file.size > max_size:
        return FilePayload(
            filename=file.filename,
            content=b"",
            content_type=file.content_type,
            declared_size=file.size,
        )

    content = await file.read()
    return FilePayload(
        filename=file.filename,
        content=content,
        content_type=file.content_type,
    )


async def release_uploads(*files: Optional[UploadFile]) -> None:
    """Best-effort removal of spooled upload temp files."""
    for file in files:
        if file is None:
            continue
        try:
            await file.close()
        except Exception as e:
            logger.debug("Failed to release upload temp file", error=str(e))


def log_operation_start(operation: str, **context) -> None:
    """Log the start of an operation consistently."""
    logger.info(f"{operation} started", **context)


def log_operation_success(operation: str, **context) -> None:
    """Log successful operation completion consistently."""
    logger.info(f"{operation} completed successfully", **context)
