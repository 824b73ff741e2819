"""
Domain models for the user resource.

``User`` is the persisted record; ``UserFields`` is the input handed to
UserService, where a key that was never set is "absent" and a key set to
None is "present with null".
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel

from common.storage import Upload

# Attributes that callers may write through UserService
FILLABLE = ("name", "email", "status", "image")


class User(BaseModel):
    """A user record as stored in the ``users`` collection."""

    id: str
    name: str
    email: str
    status: Optional[str] = None
    image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "User":
        """Build a User from a raw MongoDB document."""
        return cls(
            id=str(doc["_id"]),
            name=doc["name"],
            email=doc["email"],
            status=doc.get("status"),
            image=doc.get("image"),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )


class UserFields(BaseModel):
    """
    Field data for creating or updating a user.

    Only keys that were explicitly set are applied on update; pass
    ``status=None`` or ``image=None`` to clear a value.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    status: Optional[str] = None
    image: Optional[Upload] = None

    def provided(self) -> Dict[str, Any]:
        """Return only the keys that were explicitly set, values untouched."""
        return {key: getattr(self, key) for key in FILLABLE if key in self.model_fields_set}

    def has_image_upload(self) -> bool:
        """True when an image key is present and carries a non-empty payload."""
        return "image" in self.model_fields_set and bool(self.image)
