from postdesk.repositories.base import BaseRepository
from postdesk.repositories.category import CategoryRepository
from postdesk.repositories.post import PostFilter, PostRepository, StoredImage, escape_like
from postdesk.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "PostFilter",
    "PostRepository",
    "StoredImage",
    "UserRepository",
    "escape_like",
]
