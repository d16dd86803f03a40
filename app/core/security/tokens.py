"""JWT access token creation and verification."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import jwt

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def create_access_token(
    user_id: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token identifying a user.

    Args:
        user_id: Identifier stored in the ``sub`` claim
        expires_delta: Custom expiration time (overrides config)

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "iat": now,
        "jti": str(uuid.uuid4()),
        "token_type": "access",
    }

    return jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token to verify

    Returns:
        Decoded token data or None if invalid
    """
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )

        if settings.ENABLE_AUTH_AUDIT_LOGGING:
            token_id = payload.get("jti")
            logger.debug(
                "Token verified successfully",
                token_id=token_id[:8] + "..." if token_id else "none",
                user_id=payload.get("sub"),
            )

        return payload

    except jwt.ExpiredSignatureError:
        if settings.ENABLE_AUTH_AUDIT_LOGGING:
            logger.debug("Token verification failed: expired signature")
        return None
    except jwt.InvalidSignatureError:
        logger.warning(
            "Token verification failed: invalid signature - possible tampering attempt"
        )
        return None
    except jwt.DecodeError:
        logger.warning("Token verification failed: decode error")
        return None
    except jwt.PyJWTError as e:
        logger.warning("Token verification failed", error=str(e))
        return None
