"""
FastAPI router for user endpoints.

Provides create, show, update and destroy for users, plus a download
endpoint for stored images.
"""

import mimetypes
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from common.storage import BlobStore
from common.utils import success_response
from users import pipelines
from users.dependencies import get_blob_store, get_user_repository, get_user_service
from users.repository import UserRepository
from users.schemas import (
    DestroyResponse,
    UserResource,
    parse_create_request,
    parse_update_request,
    read_user_form,
)
from users.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])
storage_router = APIRouter(tags=["storage"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def store_user(
    request: Request,
    user_service: Annotated[UserService, Depends(get_user_service)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
):
    """
    Create a user.

    Multipart form with name, email, optional status and optional image.
    """
    body = parse_create_request(await read_user_form(request))

    user = await pipelines.store_user_pipeline(
        user_service=user_service,
        repository=repository,
        fields=body.to_fields(),
    )

    return success_response(UserResource.from_user(user, blob_store).model_dump())


@router.get("/{user_id}")
async def show_user(
    user_id: str,
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
):
    """Get a single user."""
    user = await pipelines.load_user_pipeline(repository, user_id)
    return success_response(UserResource.from_user(user, blob_store).model_dump())


@router.patch("/{user_id}")
async def update_user(
    user_id: str,
    request: Request,
    user_service: Annotated[UserService, Depends(get_user_service)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
):
    """
    Update a user.

    Only provided fields will be updated (partial update). Send an empty
    status or image to clear it.
    """
    body = parse_update_request(await read_user_form(request))

    user = await pipelines.update_user_pipeline(
        user_service=user_service,
        repository=repository,
        user_id=user_id,
        fields=body.to_fields(),
    )

    return success_response(UserResource.from_user(user, blob_store).model_dump())


@router.delete("/{user_id}")
async def destroy_user(
    user_id: str,
    user_service: Annotated[UserService, Depends(get_user_service)],
    repository: Annotated[UserRepository, Depends(get_user_repository)],
):
    """Delete a user and its image."""
    result = await pipelines.destroy_user_pipeline(
        user_service=user_service,
        repository=repository,
        user_id=user_id,
    )

    return success_response(DestroyResponse(**result).model_dump())


@storage_router.get("/storage/{path:path}")
async def download_blob(
    path: str,
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
):
    """Serve a stored file."""
    content = await pipelines.read_blob_pipeline(blob_store, path)
    media_type, _ = mimetypes.guess_type(path)
    return Response(content=content, media_type=media_type or "application/octet-stream")
