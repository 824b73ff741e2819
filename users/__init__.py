"""
User System

Manages user records and their optional image, including upload on
create, replacement on update and removal on destroy.
"""

from users.models import User, UserFields
from users.repository import UserRepository, MongoUserRepository
from users.services.user_service import UserService

__all__ = [
    "User",
    "UserFields",
    "UserRepository",
    "MongoUserRepository",
    "UserService",
]
