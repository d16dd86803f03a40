"""Pydantic schemas for API requests and responses.

This package contains the request/response models organized by domain:
- auth.py: Signup and login schemas
- document.py: Document envelopes
- payment.py: Payment order and verification schemas
- errors.py: Error response schemas

Import from this module: `from app.models.schemas import AuthResponse`
"""

from app.models.schemas.auth import (
    SignupRequest,
    LoginRequest,
    UserPublic,
    AuthResponse,
)

from app.models.schemas.document import (
    DocumentResponse,
    DocumentListResponse,
    AckResponse,
)

from app.models.schemas.payment import (
    CreateOrderRequest,
    VerifyPaymentRequest,
    OrderResponse,
    PaymentStatusResponse,
)

from app.models.schemas.errors import (
    ErrorResponse,
    COMMON_ERROR_RESPONSES,
    DOCUMENT_ERROR_RESPONSES,
)

__all__ = [
    # Auth
    "SignupRequest",
    "LoginRequest",
    "UserPublic",
    "AuthResponse",
    # Document
    "DocumentResponse",
    "DocumentListResponse",
    "AckResponse",
    # Payment
    "CreateOrderRequest",
    "VerifyPaymentRequest",
    "OrderResponse",
    "PaymentStatusResponse",
    # Errors
    "ErrorResponse",
    "COMMON_ERROR_RESPONSES",
    "DOCUMENT_ERROR_RESPONSES",
]
