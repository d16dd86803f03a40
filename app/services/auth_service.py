import asyncio
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.db_client import DatabaseManager
from app.core.exceptions import InvalidCredentialsError, ValidationError
from app.core.logging import get_service_logger
from app.core.security import create_access_token, hash_password, verify_password
from app.models.db_models import UserModel
from app.models.identifiers import EntityId
from app.models.user import User

logger = get_service_logger("auth")

EMAIL_ALREADY_USED = "Email already used"


class AuthService:
    """Service for signup and login."""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self.logger = logger

    @staticmethod
    def _model_to_pydantic(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password_hash=model.password_hash,
            created_at=model.created_at,
        )

    async def _find_by_email(self, session, email: str) -> Optional[UserModel]:
        result = await session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()

    async def signup(self, name: str, email: str, password: str) -> Tuple[User, str]:
        """
        Register a new user and issue an access token.

        Args:
            name: Display name
            email: Normalized email address
            password: Plain text password

        Returns:
            Tuple of (created user, access token)

        Raises:
            ValidationError: If the email is already registered
        """
        # bcrypt is CPU bound; keep it off the event loop
        password_hash = await asyncio.to_thread(hash_password, password)

        try:
            async with self.db.session() as session:
                if await self._find_by_email(session, email):
                    raise ValidationError(EMAIL_ALREADY_USED)

                model = UserModel(
                    id=str(EntityId.new()),
                    name=name,
                    email=email,
                    password_hash=password_hash,
                )
                session.add(model)
                await session.flush()
                user = self._model_to_pydantic(model)

        except IntegrityError as e:
            # Concurrent signup with the same email
            self.logger.warning("Database integrity error on signup", error=str(e))
            raise ValidationError(EMAIL_ALREADY_USED)

        token = create_access_token(user.id)

        if settings.ENABLE_AUTH_AUDIT_LOGGING:
            self.logger.info("User signed up", user_id=user.id)

        return user, token

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate a user with email and password.

        Returns:
            Tuple of (user, access token)

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        async with self.db.session() as session:
            model = await self._find_by_email(session, email)
            user = self._model_to_pydantic(model) if model else None

        if user is None:
            if settings.ENABLE_AUTH_AUDIT_LOGGING:
                self.logger.warning("Login failed: unknown email")
            raise InvalidCredentialsError()

        password_ok = await asyncio.to_thread(
            verify_password, password, user.password_hash
        )
        if not password_ok:
            if settings.ENABLE_AUTH_AUDIT_LOGGING:
                self.logger.warning("Login failed: wrong password", user_id=user.id)
            raise InvalidCredentialsError()

        token = create_access_token(user.id)

        if settings.ENABLE_AUTH_AUDIT_LOGGING:
            self.logger.info("User logged in", user_id=user.id)

        return user, token
