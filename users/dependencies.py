"""
FastAPI dependencies for the user resource.

Provides dependency injection for the user repository, blob store and
UserService.
"""

from common.storage import BlobStore
from users.repository import UserRepository
from users.services.user_service import UserService


_user_repository: UserRepository | None = None
_blob_store: BlobStore | None = None
_user_service: UserService | None = None


def init_user_services(
    repository: UserRepository,
    blob_store: BlobStore,
    image_namespace: str = UserService.DEFAULT_IMAGE_NAMESPACE,
) -> None:
    """
    Initialize user services with their collaborators.

    Called once at application startup.

    Args:
        repository: Persistence for user records
        blob_store: Storage for user images
        image_namespace: Path prefix for uploaded images
    """
    global _user_repository, _blob_store, _user_service

    _user_repository = repository
    _blob_store = blob_store
    _user_service = UserService(
        repository=repository,
        blob_store=blob_store,
        image_namespace=image_namespace,
    )


def get_user_service() -> UserService:
    """Get user service instance."""
    if _user_service is None:
        raise RuntimeError("User services not initialized. Call init_user_services first.")
    return _user_service


def get_user_repository() -> UserRepository:
    """Get user repository instance."""
    if _user_repository is None:
        raise RuntimeError("User services not initialized. Call init_user_services first.")
    return _user_repository


def get_blob_store() -> BlobStore:
    """Get blob store instance."""
    if _blob_store is None:
        raise RuntimeError("User services not initialized. Call init_user_services first.")
    return _blob_store
