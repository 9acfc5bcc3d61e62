"""Database models for the application."""

from postdesk.models.category import CategoryDB
from postdesk.models.post import PostDB
from postdesk.models.user import UserDB

__all__ = ["CategoryDB", "PostDB", "UserDB"]
