from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from app.models.identifiers import EntityId


class User(BaseModel):
    """Registered account."""

    id: EntityId = Field(..., description="Unique user identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User email (unique)")
    password_hash: str = Field(..., description="Hashed password")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When user was created",
    )

    @field_serializer("created_at")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        """Serialize datetime fields to ISO format."""
        return value.isoformat() if value else None

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
