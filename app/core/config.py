from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # FastAPI Configuration
    PROJECT_NAME: str = "OpenShelf API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = ""
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # JWT Configuration
    JWT_SECRET_KEY: str = Field(
        ...,
        description="Secret key for JWT tokens - must be cryptographically secure (min 32 chars)",
    )
    JWT_ALGORITHM: str = "HS256"

    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Validate JWT secret key has minimum length for security."""
        if len(v) < 32:
            raise ValueError(
                "JWT_SECRET_KEY must be at least 32 characters long for security. "
                'Generate a secure key with: python -c "import secrets; print(secrets.token_hex(32))"'
            )
        return v

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=7 * 24 * 60,
        description="Access token lifetime in minutes (default: 7 days)",
    )

    ENABLE_AUTH_AUDIT_LOGGING: bool = Field(
        default=True, description="Enable detailed authentication audit logging"
    )

    # PostgreSQL Configuration
    DATABASE_URL: Optional[str] = None  # Full connection URL (overrides the parts below)
    DATABASE_NAME: str = "openshelf"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432

    # Connection Pool Settings
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes
    DB_ECHO: bool = False  # SQL query logging

    # Google Cloud Storage Configuration
    GCP_PROJECT_ID: Optional[str] = None
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None  # Path to service account file
    GCS_BUCKET_NAME: str = "openshelf-books"
    GCS_PUBLIC_BASE_URL: str = "https://storage.googleapis.com"
    PDF_UPLOAD_PREFIX: str = "pdf-uploads"
    COVER_UPLOAD_PREFIX: str = "book-covers"

    # Upload Configuration
    MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50MB in bytes

    # Razorpay Configuration
    RAZORPAY_KEY_ID: Optional[str] = None
    RAZORPAY_KEY_SECRET: Optional[str] = None
    RAZORPAY_API_BASE_URL: str = "https://api.razorpay.com/v1"
    BOOK_PRICE: int = Field(
        default=900, description="Price per book in the currency's smallest unit (paise)"
    )
    PAYMENT_CURRENCY: str = "INR"

    # CORS Settings
    FRONTEND_URL: str = "http://localhost:3000"

    # Additional CORS Origins (comma-separated string or JSON array)
    ADDITIONAL_CORS_ORIGINS: Optional[str] = None

    CORS_CREDENTIALS: bool = True
    CORS_METHODS: List[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    CORS_HEADERS: List[str] = [
        "Authorization",
        "Content-Type",
        "X-Requested-With",
        "Accept",
        "Origin",
    ]

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text

    # Cache Configuration
    CACHE_ENABLED: bool = True
    CACHE_BACKEND: str = "memory"  # "memory" (default) or "redis"

    # Redis Configuration (only used when CACHE_BACKEND=redis)
    REDIS_URL: Optional[str] = None  # Full connection URL (overrides the parts below)
    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: Optional[str] = None
    REDIS_DB: int = 0

    # Cache TTL Settings (in seconds)
    CACHE_BOOKS_LIST_TTL: int = 86400  # 1 day
    CACHE_PDF_FILE_TTL: int = 86400  # 1 day
    CACHE_BOOK_DETAIL_TTL: int = 86400  # 1 day, shared by detail and cover entries

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def resolved_cors_origins(self) -> List[str]:
        """Get CORS origins from the frontend URL and any additional origins."""
        import json

        origins = [self.FRONTEND_URL.rstrip("/")]

        if self.ADDITIONAL_CORS_ORIGINS:
            try:
                # Try parsing as JSON array first
                if self.ADDITIONAL_CORS_ORIGINS.startswith("["):
                    origins.extend(json.loads(self.ADDITIONAL_CORS_ORIGINS))
                else:
                    origins.extend(
                        origin.strip()
                        for origin in self.ADDITIONAL_CORS_ORIGINS.split(",")
                    )
            except (json.JSONDecodeError, ValueError):
                # Fallback to single origin
                origins.append(self.ADDITIONAL_CORS_ORIGINS)

        # Remove duplicates while preserving order
        seen = set()
        unique_origins = []
        for origin in origins:
            if origin and origin not in seen:
                seen.add(origin)
                unique_origins.append(origin)

        return unique_origins

    @property
    def resolved_database_url(self) -> str:
        """Get the database URL, building a PostgreSQL URL from parts if needed."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @property
    def resolved_redis_url(self) -> Optional[str]:
        """Get the Redis URL, or None when Redis is not configured."""
        if self.REDIS_URL:
            return self.REDIS_URL
        if not self.REDIS_HOST:
            return None
        if self.REDIS_PASSWORD:
            return (
                f"redis://:{self.REDIS_PASSWORD}@"
                f"{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
            )
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def is_development(self) -> bool:
        """Check if the application is running in development mode."""
        return self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production mode."""
        return self.ENVIRONMENT.lower() in ["production", "prod"]


# Global settings instance
settings = Settings()
