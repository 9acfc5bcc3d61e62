"""Ownership rule for mutating posts."""

from postdesk.errors import ForbiddenError
from postdesk.models import PostDB
from postdesk.schemas import Principal


def can_mutate(post: PostDB, principal: Principal) -> bool:
    """
    Return whether ``principal`` may update or delete ``post``.

    Authors may change their own posts; admins may change any post.
    """
    return principal.is_admin or post.author_id == principal.id


def ensure_can_mutate(post: PostDB, principal: Principal) -> None:
    """
    Raise unless ``principal`` may update or delete ``post``.

    Raises:
        ForbiddenError: Neither the author nor an admin
    """
    if not can_mutate(post, principal):
        raise ForbiddenError("Not authorized to modify this post")
