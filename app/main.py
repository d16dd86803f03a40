"""FastAPI Application Entry Point.

PDF book marketplace built with FastAPI, featuring:
- Book upload and storage (Google Cloud Storage)
- Cached catalog and file reads
- Razorpay checkout with signature verification
- Stateless JWT authentication
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.container import ServiceContainer
from app.core.exceptions import setup_exception_handlers
from app.core.logging import configure_logging, get_logger
from app.core.middleware import setup_all_middleware

# Configure logging first
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    logger.info(
        "Starting application",
        project_name=settings.PROJECT_NAME,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
    )

    startup_tasks = []
    owns_services = getattr(app.state, "services", None) is None

    if owns_services:
        app.state.services = await ServiceContainer.build(settings, startup_tasks)
    else:
        startup_tasks.append("Using preconfigured services")

    logger.info("Application startup completed", tasks=startup_tasks)

    yield

    # Shutdown
    logger.info("Shutting down application")

    shutdown_tasks = []
    if owns_services:
        shutdown_tasks = await app.state.services.close()
        app.state.services = None

    logger.info("Application shutdown completed", tasks=shutdown_tasks)


# API Description
API_DESCRIPTION = """# OpenShelf API

## Overview
Marketplace for PDF books: owners upload a PDF with a cover image, buyers
pay through Razorpay and read the book online.

## Authentication
**Stateless JWT**:
- **Header**: `Authorization: Bearer <token>`
- **Lifetime**: 7 days by default

**Key Endpoints:**
- `POST /signup` - Create an account and get a token
- `POST /login` - Get a token

## Books
**Storage:** Google Cloud Storage + PostgreSQL metadata
**Cache:** In-memory or Redis, 24h per entry

## Getting Started
1. **Sign up**: `POST /signup`
2. **Upload a book**: `POST /upload-files`
3. **Browse**: `GET /get-files`
4. **Buy**: `POST /payment/create-order`, then `POST /payment/verify`
"""


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description=API_DESCRIPTION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json" if settings.DEBUG else None,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # CORS, timing and request logging
    setup_all_middleware(application)

    # Exception handlers after CORS middleware
    setup_exception_handlers(application)

    from app.api.health import router as health_router
    from app.api.v1.auth import router as auth_router
    from app.api.v1.documents_main import router as documents_router
    from app.api.v1.payments import router as payments_router

    application.include_router(health_router, tags=["Health"])

    application.include_router(
        auth_router, prefix=settings.API_PREFIX, tags=["Authentication"]
    )
    application.include_router(
        documents_router, prefix=settings.API_PREFIX, tags=["Documents"]
    )
    application.include_router(
        payments_router, prefix=settings.API_PREFIX, tags=["Payments"]
    )

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )
