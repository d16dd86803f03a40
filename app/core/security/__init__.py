"""Security module for authentication.

This module provides:
- Password hashing and verification (bcrypt)
- JWT access token management
- FastAPI security dependencies

Usage:
    from app.core.security import (
        hash_password,
        verify_password,
        create_access_token,
        verify_token,
        get_current_user,
    )
"""

# Password functions
from .password import (
    hash_password,
    verify_password,
    pwd_context,
)

# Token management
from .tokens import (
    create_access_token,
    verify_token,
)

# FastAPI dependencies
from .dependencies import (
    security,
    get_current_user,
)

__all__ = [
    # Password
    "hash_password",
    "verify_password",
    "pwd_context",
    # Tokens
    "create_access_token",
    "verify_token",
    # Dependencies
    "security",
    "get_current_user",
]
