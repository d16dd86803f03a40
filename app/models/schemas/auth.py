"""Authentication request/response schemas.

Provides:
- Signup and login request models
- Token response model
"""

from pydantic import BaseModel, Field, field_validator

from app.models.identifiers import EntityId


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if not v:
        raise ValueError("Email cannot be empty")
    if "@" not in v:
        raise ValueError("Invalid email format")
    return v


class SignupRequest(BaseModel):
    """Request model for account registration."""

    name: str = Field(..., description="User's display name")
    email: str = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        return _normalize_email(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class LoginRequest(BaseModel):
    """Request model for user login."""

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="User password")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)


class UserPublic(BaseModel):
    """User fields safe to return to clients."""

    id: EntityId
    name: str
    email: str


class AuthResponse(BaseModel):
    """Response model for signup and login."""

    status: str = Field(default="ok")
    token: str = Field(..., description="Bearer access token")
    user: UserPublic
