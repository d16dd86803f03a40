import uuid
from typing import Any, Dict, Optional
from fastapi import Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from google.api_core.exceptions import GoogleAPIError
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class OpenShelfError(Exception):
    """Base exception for the OpenShelf application."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(OpenShelfError):
    """Missing or invalid request fields."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidCredentialsError(OpenShelfError):
    """Login with an unknown email or a wrong password."""

    def __init__(self, message: str = "wrong email or password"):
        super().__init__(message, "INVALID_CREDENTIALS")


class UnauthorizedError(OpenShelfError):
    """Missing, invalid or expired bearer token."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "UNAUTHORIZED")


class ForbiddenError(OpenShelfError):
    """Caller is authenticated but does not own the resource."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, "FORBIDDEN")


class NotFoundError(OpenShelfError):
    """Requested record or stored object does not exist."""

    def __init__(self, message: str = "Not found", resource_id: Optional[str] = None):
        details = {"resource_id": resource_id} if resource_id else None
        super().__init__(message, "NOT_FOUND", details)


class AlreadyPaidError(OpenShelfError):
    """User already holds access to the document."""

    def __init__(self, message: str = "Already purchased"):
        super().__init__(message, "ALREADY_PAID")


class VerificationError(OpenShelfError):
    """Payment signature does not match."""

    def __init__(self, message: str = "Payment verification failed"):
        super().__init__(message, "VERIFICATION_FAILED")


class ConfigurationError(OpenShelfError):
    """A required external service is not configured."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)


class PaymentGatewayError(OpenShelfError):
    """Payment gateway rejected a request or could not be reached."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "PAYMENT_GATEWAY_ERROR", details)


class StorageError(OpenShelfError):
    """Object storage related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "STORAGE_ERROR", details)


STATUS_CODE_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ALREADY_PAID": status.HTTP_400_BAD_REQUEST,
    "VERIFICATION_FAILED": status.HTTP_400_BAD_REQUEST,
    "CONFIGURATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "PAYMENT_GATEWAY_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "STORAGE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_error_response(
    status_code: int,
    message: str,
    error_code: str = "INTERNAL_ERROR",
    details: Optional[Dict[str, Any]] = None,
    error_id: Optional[str] = None,
) -> JSONResponse:
    """Create the standard error envelope."""

    error_response = {
        "status": "error",
        "message": message,
        "code": error_code,
        "error_id": error_id or str(uuid.uuid4())[:8],
    }

    if details:
        error_response["details"] = details

    return JSONResponse(status_code=status_code, content=error_response)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    error_id = str(uuid.uuid4())[:8]

    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code="HTTP_ERROR",
        error_id=error_id,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors as 400s."""
    error_id = str(uuid.uuid4())[:8]

    logger.warning(
        "Validation exception occurred",
        errors=exc.errors(),
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    formatted_errors = []
    for error in exc.errors():
        formatted_errors.append(
            {
                "field": ".".join(str(x) for x in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    missing = [
        error["field"].split(".")[-1]
        for error in formatted_errors
        if error["type"] == "missing"
    ]
    message = (
        f"Missing required fields: {', '.join(missing)}"
        if missing
        else "Request validation failed"
    )

    return create_error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        message=message,
        error_code="VALIDATION_ERROR",
        details={"validation_errors": formatted_errors},
        error_id=error_id,
    )


async def openshelf_exception_handler(
    request: Request, exc: OpenShelfError
) -> JSONResponse:
    """Handle custom application exceptions."""
    error_id = str(uuid.uuid4())[:8]

    status_code = STATUS_CODE_MAP.get(
        exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Application exception occurred",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
    )

    message = exc.message
    details = exc.details
    if exc.error_code == "STORAGE_ERROR" and settings.is_production:
        message = "Storage service error occurred"
        details = None

    return create_error_response(
        status_code=status_code,
        message=message,
        error_code=exc.error_code,
        details=details,
        error_id=error_id,
    )


async def google_api_exception_handler(
    request: Request, exc: GoogleAPIError
) -> JSONResponse:
    """Handle Google Cloud API errors (GCS)."""
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "Google API exception occurred",
        error=str(exc),
        path=request.url.path,
        method=request.method,
        error_id=error_id,
        exc_info=True,
    )

    # Don't expose internal errors in production
    message = "Storage service error occurred" if settings.is_production else str(exc)

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message=message,
        error_code="STORAGE_ERROR",
        error_id=error_id,
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Handle catalog store errors."""
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "Database exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
        exc_info=True,
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="Database error occurred",
        error_code="DATABASE_ERROR",
        error_id=error_id,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other unhandled exceptions."""
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        "Unhandled exception occurred",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        error_id=error_id,
        exc_info=True,
    )

    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred",
        error_code="INTERNAL_ERROR",
        error_id=error_id,
    )


def setup_exception_handlers(app):
    """Setup all exception handlers for the FastAPI app."""

    # Custom application exceptions
    app.add_exception_handler(OpenShelfError, openshelf_exception_handler)

    # HTTP exceptions
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Validation errors
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # External store errors
    app.add_exception_handler(GoogleAPIError, google_api_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)

    # General exception handler (catch-all)
    app.add_exception_handler(Exception, general_exception_handler)
