"""Health check and monitoring endpoints.

Provides endpoints for:
- Liveness message at the root
- Health check with catalog store connectivity
- Detailed service status
"""

import time
from typing import Dict, Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/")
async def root() -> Dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "message": "API is running...",
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "health": "/health",
        "status_endpoint": "/status",
    }


@router.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    """
    Health check endpoint with database connectivity verification.

    Returns 200 if healthy, 503 if database is unavailable.
    """
    services = request.app.state.services
    try:
        db_available = await services.db.test_connection(timeout=5.0)

        if not db_available:
            logger.warning("Health check failed: database unavailable")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "status": "unhealthy",
                    "timestamp": time.time(),
                    "version": settings.VERSION,
                    "database": "unavailable",
                },
            )

        return {
            "status": "healthy",
            "timestamp": time.time(),
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "database": "connected",
        }

    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "timestamp": time.time(),
                "version": settings.VERSION,
            },
        )


@router.get("/status")
async def detailed_status(request: Request) -> Dict[str, Any]:
    """Detailed status endpoint with service health checks."""
    services = request.app.state.services
    try:
        db_available = await services.db.test_connection(timeout=5.0)
        gcs_available = services.gcs.health_check()

        overall_status = "healthy" if db_available and gcs_available else "degraded"

        return {
            "application": {
                "name": settings.PROJECT_NAME,
                "version": settings.VERSION,
                "environment": settings.ENVIRONMENT,
                "debug": settings.DEBUG,
                "status": overall_status,
            },
            "services": {
                "database": {
                    "status": "connected" if db_available else "unavailable",
                    "pool_size": settings.DB_POOL_SIZE,
                    "max_overflow": settings.DB_MAX_OVERFLOW,
                },
                "storage": {
                    "status": "connected" if gcs_available else "unavailable",
                    "bucket": settings.GCS_BUCKET_NAME,
                },
                "payments": {
                    "configured": services.payment_gateway.is_configured,
                },
                "cache": services.cache.status(settings),
            },
            "configuration": {
                "cors_origins": settings.resolved_cors_origins,
                "api_prefix": settings.API_PREFIX,
                "log_level": settings.LOG_LEVEL,
                "log_format": settings.LOG_FORMAT,
            },
            "system": {
                "timestamp": time.time(),
            },
        }

    except Exception as e:
        logger.error("Status check failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "timestamp": time.time()},
        )
