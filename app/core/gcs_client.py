import os
import re
import time
import asyncio
from typing import Optional
from urllib.parse import quote, unquote, urlparse

from google.cloud import storage
from google.cloud.storage import Bucket
from google.auth.exceptions import DefaultCredentialsError
from google.api_core.exceptions import GoogleAPIError, NotFound

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import StorageError
from app.core.logging import get_service_logger

logger = get_service_logger("gcs_client")

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class GCSClientError(StorageError):
    """Base exception for GCS client errors."""

    pass


class GCSBucketNotFoundError(GCSClientError):
    """Bucket not found error."""

    pass


class GCSObjectNotFoundError(GCSClientError):
    """Object not found error."""

    pass


class GCSClient:
    """Google Cloud Storage gateway for uploaded PDFs and cover images."""

    def __init__(
        self,
        app_settings: Optional[Settings] = None,
        client: Optional[storage.Client] = None,
    ):
        self.logger = logger
        self._settings = app_settings or default_settings
        self._client: Optional[storage.Client] = client
        self._bucket: Optional[Bucket] = None
        self._bucket_name = self._settings.GCS_BUCKET_NAME
        self._initialized = False
        self._initialization_error: Optional[str] = None

        # Only initialize if a client was given or required settings are provided
        if client is not None or self._should_initialize():
            try:
                self._initialize_client()
            except Exception as e:
                self.logger.warning(
                    "GCS client initialization failed, will operate in disabled mode",
                    error=str(e),
                )
                self._initialization_error = str(e)

    def _should_initialize(self) -> bool:
        """Check if GCS client should be initialized based on available settings."""
        has_credentials = (
            self._settings.GOOGLE_APPLICATION_CREDENTIALS
            or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
            or self._check_application_default_credentials()
        )

        return bool(has_credentials and self._settings.GCP_PROJECT_ID)

    def _check_application_default_credentials(self) -> bool:
        """Check if Application Default Credentials are available."""
        try:
            import google.auth

            credentials, project = google.auth.default()
            return credentials is not None
        except Exception:
            return False

    def _initialize_client(self) -> None:
        """Initialize GCS client and bucket."""
        try:
            if self._client is None:
                if self._settings.GOOGLE_APPLICATION_CREDENTIALS:
                    os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = (
                        self._settings.GOOGLE_APPLICATION_CREDENTIALS
                    )
                self._client = storage.Client(project=self._settings.GCP_PROJECT_ID)

            try:
                self._bucket = self._client.bucket(self._bucket_name)
                # Test bucket access by checking if it exists
                self._bucket.reload()
                self._initialized = True
                self.logger.info("Connected to GCS bucket", bucket=self._bucket_name)
            except NotFound:
                self.logger.error("GCS bucket not found", bucket=self._bucket_name)
                raise GCSBucketNotFoundError(f"Bucket '{self._bucket_name}' not found")

        except GCSClientError:
            raise
        except DefaultCredentialsError as e:
            self.logger.error("GCS authentication failed", error=str(e))
            raise GCSClientError(f"GCS authentication failed: {e}")
        except Exception as e:
            self.logger.error("Failed to initialize GCS client", error=str(e))
            raise GCSClientError(f"Failed to initialize GCS client: {e}")

    @property
    def is_initialized(self) -> bool:
        """Check if GCS client is properly initialized."""
        return self._initialized

    @property
    def initialization_error(self) -> Optional[str]:
        """Get initialization error if any."""
        return self._initialization_error

    @property
    def bucket(self) -> Bucket:
        """Get the GCS bucket instance."""
        self._ensure_initialized()
        return self._bucket

    def _ensure_initialized(self) -> None:
        """Ensure GCS client is initialized, raise error if not."""
        if not self._initialized:
            error_msg = "GCS client is not initialized"
            if self._initialization_error:
                error_msg += f": {self._initialization_error}"
            else:
                error_msg += ". Please configure GCP_PROJECT_ID, GCS_BUCKET_NAME, and authentication credentials."
            raise GCSClientError(error_msg)

    @staticmethod
    def build_object_key(prefix: str, filename: str) -> str:
        """
        Build a time-based unique object key.

        Args:
            prefix: Key prefix such as ``pdf-uploads``
            filename: Original client filename

        Returns:
            Key of the form ``<prefix>/<epoch-ms>-<sanitized filename>``
        """
        name = os.path.basename(filename or "").strip()
        name = _UNSAFE_KEY_CHARS.sub("_", name).strip("_") or "file"
        return f"{prefix.strip('/')}/{int(time.time() * 1000)}-{name}"

    def public_url(self, key: str) -> str:
        """Public retrieval URL for an object key."""
        base = self._settings.GCS_PUBLIC_BASE_URL.rstrip("/")
        return f"{base}/{self._bucket_name}/{quote(key)}"

    def key_from_url(self, url: str) -> Optional[str]:
        """
        Derive the object key from a stored public URL.

        Handles path-style URLs (``<base>/<bucket>/<key>``) and bucket
        subdomain URLs (``https://<bucket>.<host>/<key>``).
        """
        if not url:
            return None

        parsed = urlparse(url)
        path = unquote(parsed.path).lstrip("/")
        if not path:
            return None

        bucket_prefix = f"{self._bucket_name}/"
        if path.startswith(bucket_prefix):
            return path[len(bucket_prefix):] or None

        # Subdomain style: the whole path is the key
        return path

    def upload_file(
        self,
        key: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload a binary payload and return its public URL.

        Args:
            key: Object key
            content: File content as bytes
            content_type: MIME content type

        Returns:
            Public URL of the stored object
        """
        self._ensure_initialized()
        try:
            blob = self.bucket.blob(key)

            if content_type:
                blob.content_type = content_type

            blob.upload_from_string(content, content_type=content_type)

            self.logger.info("Uploaded file to GCS", key=key, size=len(content))

            return self.public_url(key)

        except GoogleAPIError as e:
            self.logger.error("Failed to upload file to GCS", key=key, error=str(e))
            raise GCSClientError(f"Failed to upload file: {e}")

    def download_file(self, key: str) -> bytes:
        """
        Download an object fully into memory.

        Raises:
            GCSObjectNotFoundError: When no object is stored under the key
        """
        self._ensure_initialized()
        try:
            blob = self.bucket.blob(key)

            if not blob.exists():
                raise GCSObjectNotFoundError(f"File not found: {key}")

            content = blob.download_as_bytes()

            self.logger.info("Downloaded file from GCS", key=key, size=len(content))

            return content

        except NotFound:
            raise GCSObjectNotFoundError(f"File not found: {key}")
        except GoogleAPIError as e:
            self.logger.error("Failed to download file from GCS", key=key, error=str(e))
            raise GCSClientError(f"Failed to download file: {e}")

    # Async versions for use in request handlers
    async def upload_file_async(
        self, key: str, content: bytes, content_type: Optional[str] = None
    ) -> str:
        """Async version of upload_file."""
        return await asyncio.to_thread(self.upload_file, key, content, content_type)

    async def download_file_async(self, key: str) -> bytes:
        """Async version of download_file."""
        return await asyncio.to_thread(self.download_file, key)

    def health_check(self) -> bool:
        """
        Check if GCS client and bucket are accessible.

        Returns:
            True if healthy, False otherwise
        """
        if not self._initialized:
            return False

        try:
            self.bucket.reload()
            return True
        except Exception as e:
            self.logger.error("GCS health check failed", error=str(e))
            return False
