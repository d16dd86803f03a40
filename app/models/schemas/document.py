"""Document schemas for API responses."""

from typing import List

from pydantic import BaseModel, Field

from app.models.document import Document


class DocumentResponse(BaseModel):
    """Single document envelope."""

    status: str = Field(default="ok")
    data: Document


class DocumentListResponse(BaseModel):
    """Document list envelope."""

    status: str = Field(default="ok")
    data: List[Document] = Field(default_factory=list)


class AckResponse(BaseModel):
    """Acknowledgement without payload."""

    status: str = Field(default="ok")
    message: str = Field(default="")
