"""FastAPI security dependencies.

Provides:
- HTTPBearer security scheme
- get_current_user dependency for protected endpoints
"""

from typing import Dict, Any, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings
from app.core.exceptions import UnauthorizedError
from app.core.logging import get_auth_logger
from app.models.identifiers import EntityId
from .tokens import verify_token

logger = get_auth_logger()

# Missing credentials are reported as 401 by get_current_user, not 403
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    """
    FastAPI dependency resolving the caller from a bearer token.

    Returns:
        Dictionary containing user_id and token metadata

    Raises:
        UnauthorizedError: If the token is missing, invalid, expired or of the wrong type
    """
    if credentials is None or not credentials.credentials:
        if settings.ENABLE_AUTH_AUDIT_LOGGING:
            logger.warning("Authentication failed: missing bearer token")
        raise UnauthorizedError()

    payload = verify_token(credentials.credentials)
    if not payload:
        if settings.ENABLE_AUTH_AUDIT_LOGGING:
            logger.warning("Authentication failed: Invalid or expired token")
        raise UnauthorizedError()

    token_type = payload.get("token_type")
    if token_type != "access":
        if settings.ENABLE_AUTH_AUDIT_LOGGING:
            logger.warning(
                "Authentication failed: Invalid token type", provided_type=token_type
            )
        raise UnauthorizedError()

    user_id = payload.get("sub")
    if not user_id:
        logger.error("Authentication failed: token has no subject")
        raise UnauthorizedError()

    token_id = payload.get("jti")
    if settings.ENABLE_AUTH_AUDIT_LOGGING:
        logger.debug(
            "Authentication success",
            user_id=user_id,
            token_id=token_id[:8] + "..." if token_id else "none",
        )

    return {
        "user_id": EntityId(user_id),
        "token_id": token_id,
        "issued_at": payload.get("iat"),
        "expires_at": payload.get("exp"),
    }
