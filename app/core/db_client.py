"""
Async catalog store connection management using SQLAlchemy 2.0.

Supports both:
- PostgreSQL through asyncpg (deployments)
- SQLite through aiosqlite (local runs and tests)

The manager is constructed once at application startup and handed to the
services that need it; it holds a single engine for the process lifetime.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, StaticPool

from app.core.config import Settings, settings as default_settings
from app.models.db_models import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Owns the async engine and session factory for the catalog store."""

    def __init__(
        self,
        app_settings: Optional[Settings] = None,
        database_url: Optional[str] = None,
    ):
        self._settings = app_settings or default_settings
        self._database_url = database_url or self._settings.resolved_database_url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self._database_url.startswith("sqlite")

    def _create_engine(self) -> AsyncEngine:
        """Create the engine for the configured URL."""
        if self.is_sqlite:
            # One shared connection keeps in-memory databases alive across sessions
            logger.info("Creating SQLite database engine")
            return create_async_engine(
                self._database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=self._settings.DB_ECHO,
            )

        # Log connection info without password - NEVER log credentials
        logger.info(
            "Creating direct database connection",
            extra={
                "host": self._settings.DATABASE_HOST,
                "port": self._settings.DATABASE_PORT,
                "database": self._settings.DATABASE_NAME,
                "user": self._settings.DATABASE_USER,
            },
        )
        return create_async_engine(
            self._database_url,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=self._settings.DB_POOL_SIZE,
            max_overflow=self._settings.DB_MAX_OVERFLOW,
            pool_timeout=self._settings.DB_POOL_TIMEOUT,
            pool_recycle=self._settings.DB_POOL_RECYCLE,
            echo=self._settings.DB_ECHO,
        )

    def _setup_engine(self) -> None:
        """Initialize engine and session factory on first use."""
        if self._engine is not None:
            return

        self._engine = self._create_engine()
        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(
            f"Database engine initialized: pool_size={self._settings.DB_POOL_SIZE}"
        )

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine."""
        self._setup_engine()
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker:
        """Get the session factory bound to the engine."""
        self._setup_engine()
        return self._session_factory

    async def test_connection(self, timeout: float = 15.0) -> bool:
        """Test database connectivity with timeout."""
        try:
            async with asyncio.timeout(timeout):
                async with self.engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            logger.info("Database connection test successful")
            return True
        except asyncio.TimeoutError:
            logger.error(f"Database connection test timed out after {timeout}s")
            return False
        except Exception as e:
            logger.error(f"Database connection test failed: {e}")
            return False

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async session with automatic commit/rollback.

        Usage:
            async with db.session() as session:
                result = await session.execute(...)
        """
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_tables(self):
        """Create all tables (for development/testing)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_tables(self):
        """Drop all tables (for testing only)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped")

    async def close(self):
        """Dispose the engine and its pooled connections."""
        if self._engine is not None:
            try:
                await self._engine.dispose()
            except Exception as e:
                logger.debug(f"Error disposing engine: {e}")
            finally:
                self._engine = None
                self._session_factory = None

        logger.info("Database connections closed")
