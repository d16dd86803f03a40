"""
Document Validation Service - Upload presence, size and content type checks.
"""

from typing import Optional

from app.core.exceptions import ValidationError
from app.models.document import FilePayload
from .document_base_service import DocumentBaseService

DEFAULT_IMAGE_TYPE = "image/jpeg"

# (offset, signature, media type)
_IMAGE_SIGNATURES = (
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (8, b"WEBP", "image/webp"),
    (0, b"BM", "image/bmp"),
)


def sniff_image_type(content: bytes) -> Optional[str]:
    """Detect an image media type from its leading bytes."""
    for offset, signature, media_type in _IMAGE_SIGNATURES:
        if content[offset : offset + len(signature)] == signature:
            if media_type == "image/webp" and not content.startswith(b"RIFF"):
                continue
            return media_type
    return None


class DocumentValidationService(DocumentBaseService):
    """Service for upload validation."""

    def validate_required_uploads(
        self, pdf_file: Optional[FilePayload], cover_file: Optional[FilePayload]
    ) -> None:
        """
        Raises:
            ValidationError: If either binary payload is missing
        """
        if pdf_file is None or cover_file is None:
            missing = [
                name
                for name, payload in (("file", pdf_file), ("coverImage", cover_file))
                if payload is None
            ]
            raise ValidationError("Missing file or image", details={"missing": missing})

    def validate_metadata(self, title: Optional[str], category: Optional[str]) -> None:
        missing = [
            name
            for name, value in (("title", title), ("category", category))
            if not value or not value.strip()
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )

    def validate_file_size(self, payload: FilePayload) -> None:
        """
        Raises:
            ValidationError: If the payload exceeds MAX_FILE_SIZE
        """
        if payload.size > self.max_file_size:
            max_mb = self.max_file_size // (1024 * 1024)
            raise ValidationError(
                f"File size exceeds maximum limit of {max_mb}MB",
                details={"filename": payload.filename, "size": payload.size},
            )

    def cover_content_type(self, payload: FilePayload) -> str:
        """Content type to store a cover image with."""
        declared = payload.content_type or ""
        if declared.startswith("image/"):
            return declared
        return sniff_image_type(payload.content) or DEFAULT_IMAGE_TYPE

    def detect_image_type(self, content: bytes) -> str:
        return sniff_image_type(content) or DEFAULT_IMAGE_TYPE
