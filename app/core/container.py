"""Process-wide service handles.

The container is built once inside the FastAPI lifespan, stored on
``app.state.services`` and closed at shutdown. Tests build their own
container from fakes and attach it before the app starts.
"""

from dataclasses import dataclass
from typing import List, Optional

from app.core.cache import CacheGateway, init_cache
from app.core.config import Settings
from app.core.db_client import DatabaseManager
from app.core.gcs_client import GCSClient
from app.core.logging import get_logger
from app.core.razorpay_client import RazorpayClient
from app.services.auth_service import AuthService
from app.services.document import DocumentService
from app.services.payment_service import PaymentService

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    db: DatabaseManager
    cache: CacheGateway
    gcs: GCSClient
    payment_gateway: RazorpayClient
    document_service: DocumentService
    payment_service: PaymentService
    auth_service: AuthService

    @classmethod
    def from_handles(
        cls,
        app_settings: Settings,
        db: DatabaseManager,
        cache: CacheGateway,
        gcs: GCSClient,
        payment_gateway: RazorpayClient,
    ) -> "ServiceContainer":
        """Wire services around already-constructed handles."""
        return cls(
            settings=app_settings,
            db=db,
            cache=cache,
            gcs=gcs,
            payment_gateway=payment_gateway,
            document_service=DocumentService(db, gcs, cache, app_settings),
            payment_service=PaymentService(db, payment_gateway, app_settings),
            auth_service=AuthService(db),
        )

    @classmethod
    async def build(
        cls, app_settings: Settings, startup_tasks: Optional[List[str]] = None
    ) -> "ServiceContainer":
        """Construct every handle from settings."""
        tasks = startup_tasks if startup_tasks is not None else []

        db = DatabaseManager(app_settings)
        if app_settings.is_development or db.is_sqlite:
            await db.create_tables()
            tasks.append("Database tables created/verified")
        if await db.test_connection():
            tasks.append("Database connected")
        else:
            logger.warning("Database connection test failed")

        cache = await init_cache(app_settings)
        tasks.append(f"Cache initialized ({cache.backend_name})")

        gcs = GCSClient(app_settings)
        if gcs.is_initialized:
            tasks.append("GCS connected")
        else:
            logger.warning(
                "GCS client not initialized", error=gcs.initialization_error
            )

        payment_gateway = RazorpayClient.from_settings(app_settings)
        if not payment_gateway.is_configured:
            logger.warning("Razorpay keys not configured; orders will be rejected")

        return cls.from_handles(app_settings, db, cache, gcs, payment_gateway)

    async def close(self) -> List[str]:
        """Release handles; failures are logged and do not stop the others."""
        shutdown_tasks: List[str] = []

        try:
            await self.payment_gateway.close()
            shutdown_tasks.append("Payment gateway client closed")
        except Exception as e:
            logger.error("Error closing payment gateway client", error=str(e))

        try:
            await self.cache.close()
            shutdown_tasks.append("Cache closed")
        except Exception as e:
            logger.error("Error closing cache", error=str(e))

        try:
            await self.db.close()
            shutdown_tasks.append("Database connections closed")
        except Exception as e:
            logger.error("Error closing database", error=str(e))

        return shutdown_tasks
