"""Authentication endpoints: signup and login."""

from fastapi import APIRouter, Request

from app.core.logging import get_auth_logger
from app.models.schemas import (
    AuthResponse,
    COMMON_ERROR_RESPONSES,
    LoginRequest,
    SignupRequest,
    UserPublic,
)
from app.services.auth_service import AuthService

logger = get_auth_logger()

router = APIRouter()


def _auth_service(request: Request) -> AuthService:
    return request.app.state.services.auth_service


def _auth_response(user, token: str) -> AuthResponse:
    return AuthResponse(
        token=token,
        user=UserPublic(id=user.id, name=user.name, email=user.email),
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    summary="Sign Up",
    operation_id="signup",
    description="""Create an account and receive a bearer token.

**Error Responses:**
- **400 Bad Request**: Missing fields or email already used""",
    responses=COMMON_ERROR_RESPONSES,
)
async def signup(body: SignupRequest, request: Request):
    user, token = await _auth_service(request).signup(
        name=body.name, email=body.email, password=body.password
    )
    logger.info("Signup completed", user_id=user.id)
    return _auth_response(user, token)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log In",
    operation_id="login",
    description="""Exchange email and password for a bearer token.

**Error Responses:**
- **400 Bad Request**: Wrong email or password""",
    responses=COMMON_ERROR_RESPONSES,
)
async def login(body: LoginRequest, request: Request):
    user, token = await _auth_service(request).login(
        email=body.email, password=body.password
    )
    return _auth_response(user, token)
