from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.models.identifiers import EntityId


class Document(BaseModel):
    """Catalog record for an uploaded book.

    Wire names (``pdf``, ``coverImage``, ``owner``, ``paidUsers``) follow
    the client contract; Python code uses the field names.
    """

    id: EntityId = Field(..., description="Unique document identifier")
    title: str = Field(..., description="Book title")
    category: str = Field(..., description="Book category")

    # Storage locations
    pdf_url: Optional[str] = Field(
        None, alias="pdf", description="Public URL of the PDF object"
    )
    cover_image_url: Optional[str] = Field(
        None, alias="coverImage", description="Public URL of the cover image"
    )

    # Ownership and access
    owner_id: EntityId = Field(..., alias="owner", description="Uploading user")
    paid_users: List[EntityId] = Field(
        default_factory=list,
        alias="paidUsers",
        description="Users who have paid for access",
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="updatedAt"
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("created_at", "updated_at")
    def serialize_datetime(self, value: datetime) -> Optional[str]:
        """Serialize datetime fields to ISO format."""
        return value.isoformat() if value else None

    def has_paid(self, user_id: str) -> bool:
        """Membership check by canonical identifier."""
        return EntityId(user_id) in self.paid_users

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == EntityId(user_id)

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, title='{self.title}', owner='{self.owner_id}')>"


class FilePayload(BaseModel):
    """A buffered binary upload."""

    filename: str
    content: bytes
    content_type: Optional[str] = None
    # Set when an oversized part was left unread
    declared_size: Optional[int] = None

    @property
    def size(self) -> int:
        if self.declared_size is not None:
            return self.declared_size
        return len(self.content)
