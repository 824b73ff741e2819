"""
User service application settings.

Extends the base settings with user-resource configuration.
"""

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """User service specific settings."""

    # ==========================================================================
    # User Images
    # ==========================================================================
    # Namespace (directory prefix) for uploaded user images
    USER_IMAGE_NAMESPACE: str = "images/users"

    # Maximum accepted upload size (5MB)
    MAX_IMAGE_SIZE_BYTES: int = 5 * 1024 * 1024

    # Accepted image content types, comma-separated
    ALLOWED_IMAGE_TYPES: str = "image/jpeg,image/png,image/gif,image/webp,image/bmp,image/svg+xml"

    def get_allowed_image_types(self) -> list:
        """Parse ALLOWED_IMAGE_TYPES into a list."""
        return [t.strip() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]


# Global settings instance
settings = Settings()
