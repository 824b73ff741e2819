"""
Base settings class for environment configuration.

Uses Pydantic Settings for automatic environment variable loading.
Extend this class for application-specific settings.

Example:
    from common.config import BaseAppSettings

    class Settings(BaseAppSettings):
        # App-specific settings
        USER_IMAGE_NAMESPACE: str = "avatars"

    settings = Settings()
    print(settings.MONGODB_URI)
"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


STORAGE_BACKENDS = ("local", "gridfs")


class BaseAppSettings(BaseSettings):
    """
    Base settings class with common configuration options.

    Automatically loads values from environment variables.
    Extend this class for application-specific settings.
    """

    # ==========================================================================
    # Database Settings
    # ==========================================================================
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "user_service"

    # ==========================================================================
    # Blob Storage Settings
    # ==========================================================================
    STORAGE_BACKEND: str = "local"  # "local" or "gridfs"

    # Local filesystem storage (used when STORAGE_BACKEND = "local")
    STORAGE_ROOT: Optional[str] = "storage/app/public"

    # GridFS storage (used when STORAGE_BACKEND = "gridfs")
    STORAGE_BUCKET: str = "blobs"

    # Base URL used to build public links to stored blobs
    PUBLIC_URL: str = "http://localhost:8000"

    # ==========================================================================
    # Server Settings
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ENVIRONMENT: str = "development"  # development, staging, production
    LOG_LEVEL: str = "INFO"

    # CORS Settings
    CORS_ORIGINS: str = "*"  # Comma-separated origins or "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    # ==========================================================================
    # Pydantic Settings Configuration
    # ==========================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",  # Allow app-specific settings
        case_sensitive=True,
    )

    def get_cors_origins(self) -> list:
        """Parse CORS_ORIGINS into a list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"

    def validate_required(self) -> None:
        """
        Validate that required settings are configured.

        Raises:
            ValueError: If required settings are missing
        """
        errors = []

        if self.STORAGE_BACKEND not in STORAGE_BACKENDS:
            errors.append(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, "
                f"got {self.STORAGE_BACKEND!r}"
            )

        if self.STORAGE_BACKEND == "local" and not self.STORAGE_ROOT:
            errors.append("STORAGE_ROOT is required when using local storage")

        if self.STORAGE_BACKEND == "gridfs" and not self.STORAGE_BUCKET:
            errors.append("STORAGE_BUCKET is required when using GridFS storage")

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))
