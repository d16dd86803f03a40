"""
Pytest configuration and fixtures for the test suite.

This module provides shared fixtures for unit and integration tests. External
services are replaced at their client seams: an in-process fake for the GCS
SDK, a dict-backed cache backend, and an httpx mock transport for Razorpay.
"""

import hashlib
import hmac
import json
import os
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from faker import Faker
from fastapi_cache.backends import Backend
from httpx import AsyncClient, ASGITransport

# Set test environment before importing app modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("GCS_BUCKET_NAME", "test-bucket")
os.environ.setdefault("GCP_PROJECT_ID", "test-project")

fake = Faker()

TEST_KEY_ID = "rzp_test_key"
TEST_KEY_SECRET = "rzp_test_secret"

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n%%EOF\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (API)")
    config.addinivalue_line("markers", "auth: Authentication tests")
    config.addinivalue_line("markers", "db: Database tests")
    config.addinivalue_line("markers", "api: API endpoint tests")


# =============================================================================
# Fakes
# =============================================================================

class FakeBlob:
    """Subset of ``google.cloud.storage.Blob`` used by GCSClient."""

    def __init__(self, bucket: "FakeBucket", name: str):
        self.bucket = bucket
        self.name = name
        self.content_type: Optional[str] = None

    def upload_from_string(self, data: bytes, content_type: Optional[str] = None):
        self.bucket.objects[self.name] = bytes(data)
        self.bucket.content_types[self.name] = content_type

    def exists(self) -> bool:
        return self.name in self.bucket.objects

    def download_as_bytes(self) -> bytes:
        return self.bucket.objects[self.name]


class FakeBucket:
    def __init__(self, name: str):
        self.name = name
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, Optional[str]] = {}
        self.reload_calls = 0

    def reload(self):
        self.reload_calls += 1

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)


class FakeStorageClient:
    """Stands in for ``google.cloud.storage.Client``; one bucket per name."""

    def __init__(self):
        self.buckets: Dict[str, FakeBucket] = {}

    def bucket(self, name: str) -> FakeBucket:
        return self.buckets.setdefault(name, FakeBucket(name))


class DictBackend(Backend):
    """Per-instance cache backend; TTLs are recorded, not enforced."""

    def __init__(self):
        self.store: Dict[str, bytes] = {}
        self.ttls: Dict[str, Optional[int]] = {}

    async def get_with_ttl(self, key: str):
        return self.ttls.get(key), self.store.get(key)

    async def get(self, key: str):
        return self.store.get(key)

    async def set(self, key: str, value, expire: Optional[int] = None):
        self.store[key] = value
        self.ttls[key] = expire

    async def clear(self, namespace: Optional[str] = None, key: Optional[str] = None):
        if key is not None:
            self.store.pop(key, None)
            self.ttls.pop(key, None)
            return 1
        count = len(self.store)
        self.store.clear()
        self.ttls.clear()
        return count


class FailingBackend(Backend):
    """Backend whose every call fails, like an unreachable Redis."""

    async def get_with_ttl(self, key: str):
        raise ConnectionError("cache unavailable")

    async def get(self, key: str):
        raise ConnectionError("cache unavailable")

    async def set(self, key: str, value, expire: Optional[int] = None):
        raise ConnectionError("cache unavailable")

    async def clear(self, namespace: Optional[str] = None, key: Optional[str] = None):
        raise ConnectionError("cache unavailable")


class GatewayRecorder:
    """httpx mock transport handler emulating the Razorpay Orders API."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.fail_with: Optional[Dict[str, Any]] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(400, json={"error": self.fail_with})

        body = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "id": f"order_{len(self.requests):014d}",
                "entity": "order",
                "amount": body["amount"],
                "currency": body["currency"],
                "receipt": body["receipt"],
                "notes": body.get("notes", {}),
                "status": "created",
            },
        )

    @property
    def order_calls(self) -> int:
        return len(self.requests)


def sign_payment(order_id: str, payment_id: str, secret: str = TEST_KEY_SECRET) -> str:
    """Checkout callback signature, as the gateway computes it."""
    return hmac.new(
        secret.encode("utf-8"),
        f"{order_id}|{payment_id}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def create_auth_header(token: str) -> Dict[str, str]:
    """Create an authorization header with a bearer token."""
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Settings and Handles
# =============================================================================

@pytest.fixture
def test_settings():
    """Application settings with gateway test keys."""
    from app.core.config import settings

    return settings.model_copy(
        update={
            "RAZORPAY_KEY_ID": TEST_KEY_ID,
            "RAZORPAY_KEY_SECRET": TEST_KEY_SECRET,
            "CACHE_ENABLED": True,
            "CACHE_BACKEND": "memory",
        }
    )


@pytest_asyncio.fixture
async def db(test_settings) -> AsyncGenerator[Any, None]:
    """Fresh in-memory SQLite catalog store per test."""
    from app.core.db_client import DatabaseManager

    manager = DatabaseManager(test_settings, database_url="sqlite+aiosqlite:///:memory:")
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
def storage_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def gcs(test_settings, storage_client):
    from app.core.gcs_client import GCSClient

    return GCSClient(test_settings, client=storage_client)


@pytest.fixture
def stored_objects(storage_client, test_settings) -> Dict[str, bytes]:
    """Objects written to the fake bucket, by key."""
    return storage_client.bucket(test_settings.GCS_BUCKET_NAME).objects


@pytest.fixture
def cache_backend() -> DictBackend:
    return DictBackend()


@pytest.fixture
def cache(cache_backend):
    from app.core.cache import CacheGateway

    return CacheGateway(cache_backend, "memory")


@pytest.fixture
def gateway_recorder() -> GatewayRecorder:
    return GatewayRecorder()


@pytest_asyncio.fixture
async def payment_gateway(test_settings, gateway_recorder):
    from app.core.razorpay_client import RazorpayClient

    client = RazorpayClient.from_settings(
        test_settings,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(gateway_recorder)),
    )
    yield client
    await client.close()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def services(test_settings, db, cache, gcs, payment_gateway):
    """Service container wired around the test handles."""
    from app.core.container import ServiceContainer

    return ServiceContainer.from_handles(test_settings, db, cache, gcs, payment_gateway)


@pytest.fixture
def document_service(services):
    return services.document_service


@pytest.fixture
def payment_service(services):
    return services.payment_service


@pytest.fixture
def auth_service(services):
    return services.auth_service


# =============================================================================
# Payload Fixtures
# =============================================================================

@pytest.fixture
def pdf_payload():
    from app.models.document import FilePayload

    return FilePayload(
        filename=fake.file_name(extension="pdf"),
        content=PDF_BYTES,
        content_type="application/pdf",
    )


@pytest.fixture
def cover_payload():
    from app.models.document import FilePayload

    return FilePayload(filename="cover.png", content=PNG_BYTES, content_type="image/png")


# =============================================================================
# Authentication Fixtures
# =============================================================================

@pytest.fixture
def mock_jwt_secret():
    """Provide a consistent JWT secret for testing."""
    return os.environ["JWT_SECRET_KEY"]


@pytest.fixture
def user_id():
    from app.models.identifiers import EntityId

    return EntityId.new()


@pytest.fixture
def other_user_id():
    from app.models.identifiers import EntityId

    return EntityId.new()


@pytest.fixture
def auth_headers(user_id) -> Dict[str, str]:
    from app.core.security import create_access_token

    return create_auth_header(create_access_token(user_id))


@pytest.fixture
def other_auth_headers(other_user_id) -> Dict[str, str]:
    from app.core.security import create_access_token

    return create_auth_header(create_access_token(other_user_id))


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def app(services):
    """Create a test FastAPI application with preconfigured services."""
    # Import here to ensure test environment is set
    from app.main import create_app

    application = create_app()
    application.state.services = services
    return application


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def sign():
    """Signature helper for checkout callbacks."""
    return sign_payment


@pytest.fixture
def upload_form():
    """Multipart body for a complete book upload."""

    def _build(title: str = "Algebra", category: str = "math", cover: bytes = PNG_BYTES):
        data = {"title": title, "category": category}
        files = {
            "file": ("algebra.pdf", PDF_BYTES, "application/pdf"),
            "coverImage": ("cover.png", cover, "image/png"),
        }
        return data, files

    return _build


@pytest.fixture
def failing_cache():
    """Cache gateway over a backend that is down."""
    from app.core.cache import CacheGateway

    return CacheGateway(FailingBackend(), "redis")
