"""Embedded comment management."""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from postdesk.errors import RecordNotFoundError, ValidationError
from postdesk.models import UserDB
from postdesk.monitoring import get_logger
from postdesk.repositories import PostRepository, UserRepository
from postdesk.schemas import AuthorSummary, CommentResponse
from postdesk.utils import isoformat, utc_now

logger = get_logger(__name__)


def _author_id(comment: dict[str, Any]) -> UUID | None:
    raw = comment.get("user_id")
    if not raw:
        return None
    try:
        return UUID(str(raw))
    except ValueError:
        logger.warning(f"Ignoring malformed comment author id {raw!r}")
        return None


class CommentManager:
    """Appends comments to a post and renders them with author details."""

    def __init__(self, posts: PostRepository, users: UserRepository) -> None:
        self.posts = posts
        self.users = users

    async def append(
        self,
        post_id: UUID,
        author_id: UUID | None,
        content: str,
    ) -> list[CommentResponse]:
        """
        Append a comment to a post.

        The post row is locked for the rest of the transaction so concurrent
        appends do not overwrite each other.

        Args:
            post_id: Post UUID
            author_id: Commenting principal, None for anonymous
            content: Comment text

        Returns:
            list[CommentResponse]: The full updated comment list

        Raises:
            ValidationError: If content is empty
            RecordNotFoundError: If the post does not exist
        """
        text = (content or "").strip()
        if not text:
            mssg = "Comment content is required"
            raise ValidationError(mssg)

        post = await self.posts.lock_for_comment(post_id)
        if post is None:
            mssg = "Post not found"
            raise RecordNotFoundError(mssg)

        record = {
            "user_id": str(author_id) if author_id else None,
            "content": text,
            "created_at": isoformat(utc_now()),
        }
        post = await self.posts.set_comments(post, [*post.comments, record])
        logger.info(f"Comment added to post {post_id} ({len(post.comments)} total)")
        return await self.render(post.comments)

    async def authors(self, comments: list[dict[str, Any]]) -> dict[UUID, UserDB]:
        """
        Load the users who wrote ``comments``.

        Best effort: a lookup failure is logged and yields no author details.
        """
        ids = {author for author in map(_author_id, comments) if author is not None}
        try:
            return await self.users.get_many(ids)
        except SQLAlchemyError:
            logger.exception("Could not load comment authors")
            return {}

    async def render(self, comments: list[dict[str, Any]]) -> list[CommentResponse]:
        """Turn stored comment records into response models, in append order."""
        users = await self.authors(comments)
        rendered = []
        for comment in comments:
            user = users.get(author) if (author := _author_id(comment)) else None
            rendered.append(
                CommentResponse(
                    user=AuthorSummary(id=user.uuid, username=user.username) if user else None,
                    content=comment.get("content", ""),
                    created_at=comment.get("created_at", ""),
                ),
            )
        return rendered
