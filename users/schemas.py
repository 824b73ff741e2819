"""
Pydantic models for user request/response validation.

Requests arrive as multipart forms; ``read_user_form`` turns the raw form
into a plain dict (empty strings become None, uploaded files become
``Upload`` payloads) before the request models validate it.
"""

from typing import Any, Dict, List, Optional

import pydantic
from pydantic import BaseModel, EmailStr, Field, field_validator
from starlette.datastructures import UploadFile
from starlette.requests import Request

from common.storage import BlobStore, Upload
from common.utils.exceptions import ValidationException
from users.config import settings
from users.models import User, UserFields


async def read_user_form(request: Request) -> Dict[str, Any]:
    """
    Read a multipart or urlencoded form into a dict.

    Keys missing from the form stay missing, so partial updates can tell
    "not provided" from "provided as empty".
    """
    form = await request.form()
    data: Dict[str, Any] = {}

    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            content = await value.read()
            if not content and not value.filename:
                data[key] = None
            else:
                data[key] = Upload(
                    content=content,
                    filename=value.filename,
                    content_type=value.content_type,
                )
        elif isinstance(value, str) and value.strip() == "":
            data[key] = None
        else:
            data[key] = value

    return data


def _validate_image(value: Any) -> Optional[Upload]:
    if value is None:
        return None
    if not isinstance(value, Upload):
        raise ValueError("The image field must be an image.")

    allowed_types = settings.get_allowed_image_types()
    if value.content_type not in allowed_types:
        raise ValueError("The image field must be an image.")

    if value.size > settings.MAX_IMAGE_SIZE_BYTES:
        max_mb = settings.MAX_IMAGE_SIZE_BYTES // (1024 * 1024)
        raise ValueError(f"The image field must not be greater than {max_mb}MB.")

    return value


class UserCreateRequest(BaseModel):
    """Request body for creating a user."""
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    status: Optional[str] = Field(None, max_length=255)
    image: Optional[Upload] = None

    @field_validator("image", mode="before")
    @classmethod
    def check_image(cls, value: Any) -> Optional[Upload]:
        return _validate_image(value)

    def to_fields(self) -> UserFields:
        return UserFields(
            name=self.name,
            email=str(self.email),
            status=self.status,
            image=self.image,
        )


class UserUpdateRequest(BaseModel):
    """
    Request body for updating a user.

    Only provided fields will be updated (partial update).
    """
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    status: Optional[str] = Field(None, max_length=255)
    image: Optional[Upload] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("The name field is required.")
        return value

    @field_validator("image", mode="before")
    @classmethod
    def check_image(cls, value: Any) -> Optional[Upload]:
        return _validate_image(value)

    def to_fields(self) -> UserFields:
        provided = {key: getattr(self, key) for key in self.model_fields_set}
        return UserFields(**provided)


def _field_errors(error: pydantic.ValidationError) -> List[Dict[str, str]]:
    errors = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "body"
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": field, "message": message})
    return errors


def parse_create_request(data: Dict[str, Any]) -> UserCreateRequest:
    """Validate form data for user creation, raising a 422 on failure."""
    try:
        return UserCreateRequest(**data)
    except pydantic.ValidationError as e:
        raise ValidationException(message="Invalid user data", errors=_field_errors(e))


def parse_update_request(data: Dict[str, Any]) -> UserUpdateRequest:
    """Validate form data for a user update, raising a 422 on failure."""
    if "email" in data:
        raise ValidationException(
            message="Invalid user data",
            errors=[{"field": "email", "message": "The email field cannot be changed."}],
        )
    try:
        return UserUpdateRequest(**data)
    except pydantic.ValidationError as e:
        raise ValidationException(message="Invalid user data", errors=_field_errors(e))


class UserResource(BaseModel):
    """User in API responses. ``image`` is the public URL of the stored image."""
    id: str
    name: str
    email: str
    status: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_user(cls, user: User, blob_store: BlobStore) -> "UserResource":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            status=user.status,
            image=blob_store.url(user.image) if user.image else None,
        )


class DestroyResponse(BaseModel):
    """Response for user deletion."""
    destroyed: bool
