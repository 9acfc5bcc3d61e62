"""Post repository for database operations."""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from sqlalchemy import Text, cast, desc, func, or_, select, update
from sqlalchemy.orm import defer
from sqlalchemy.orm.interfaces import ORMOption

from postdesk.errors import DuplicateSlugError
from postdesk.models import PostDB
from postdesk.monitoring import get_logger
from postdesk.repositories.base import BaseRepository
from postdesk.utils import utc_now

logger = get_logger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """
    Escape LIKE wildcards so user input matches literally.

    Examples
    --------
    >>> escape_like("50%_off")
    '50\\\\%\\\\_off'
    """
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


@dataclass(frozen=True)
class PostFilter:
    """
    Listing filter.

    Parameters
    ----------
    is_published : bool | None
        Publication state to match; ``None`` matches drafts and published posts.
    category_id : UUID | None
        Restrict to one category.
    """

    is_published: bool | None = True
    category_id: UUID | None = None


@dataclass(frozen=True)
class StoredImage:
    data: bytes
    content_type: str
    filename: str | None


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for Post database operations.

    Entity queries never load the featured image bytes; they are fetched
    on their own through ``get_image``.
    """

    model = PostDB
    label = "Post"

    def load_options(self) -> tuple[ORMOption, ...]:
        # pyrefly: ignore [bad-argument-type]
        return (defer(PostDB.featured_image_data),)

    def duplicate_error(self, record: PostDB, message: str) -> DuplicateSlugError:
        logger.info(f"Slug collision on commit for '{record.slug}': {message}")
        return DuplicateSlugError(record.slug)

    async def create(self, post: PostDB) -> PostDB:
        """
        Persist a new post.

        Raises:
            DuplicateSlugError: If another post took the slug first
        """
        return await self._add_and_refresh(post)

    async def get_by_slug(self, slug: str) -> PostDB | None:
        return await self.get_by_field("slug", slug)

    async def list_posts(
        self,
        post_filter: PostFilter,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[PostDB], int]:
        """
        Get one page of posts, newest first, with the total match count.

        Args:
            post_filter: Publication and category filter
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            tuple[list[PostDB], int]: The page and the total number of matches
        """
        conditions = []
        if post_filter.is_published is not None:
            # pyrefly: ignore [bad-argument-type]
            conditions.append(PostDB.is_published == post_filter.is_published)
        if post_filter.category_id is not None:
            # pyrefly: ignore [bad-argument-type]
            conditions.append(PostDB.category_id == post_filter.category_id)

        query = (
            select(PostDB)
            .options(*self.load_options())
            .where(*conditions)
            # pyrefly: ignore [bad-argument-type]
            .order_by(desc(PostDB.created_at))
            .offset(skip)
            .limit(limit)
        )
        total_query = select(func.count()).select_from(PostDB).where(*conditions)

        result = await self.session.execute(query)
        total = await self.session.execute(total_query)
        return list(result.scalars().all()), total.scalar() or 0

    async def search(self, query: str, limit: int = 20) -> list[PostDB]:
        """
        Case-insensitive substring search over published posts.

        Matches the title, the content, or any tag. Tags are matched against
        the JSON text of the tag list.

        Args:
            query: Non-empty search text, matched literally
            limit: Maximum number of records to return

        Returns:
            list[PostDB]: Matching posts, newest first
        """
        pattern = f"%{escape_like(query)}%"
        statement = (
            select(PostDB)
            .options(*self.load_options())
            .where(
                # pyrefly: ignore [bad-argument-type]
                PostDB.is_published.is_(True),
                or_(
                    # pyrefly: ignore [missing-attribute]
                    PostDB.title.ilike(pattern, escape=LIKE_ESCAPE),
                    # pyrefly: ignore [missing-attribute]
                    PostDB.content.ilike(pattern, escape=LIKE_ESCAPE),
                    cast(PostDB.tags, Text).ilike(pattern, escape=LIKE_ESCAPE),
                ),
            )
            # pyrefly: ignore [bad-argument-type]
            .order_by(desc(PostDB.created_at))
            .limit(limit)
        )
        result = await self.session.execute(statement)
        posts = list(result.scalars().all())
        logger.info(f"Found {len(posts)} posts matching '{query}'")
        return posts

    async def update(self, post: PostDB, changes: dict[str, Any]) -> PostDB:
        """
        Apply a patch to a loaded post and bump ``updated_at``.

        Raises:
            DuplicateSlugError: If a regenerated slug collides on flush
        """
        return await self._save(post, {**changes, "updated_at": utc_now()})

    async def increment_view(self, post_id: UUID) -> bool:
        """
        Atomically add one to a post's view count.

        Runs a single ``UPDATE ... SET view_count = view_count + 1`` so
        concurrent readers never lose increments.

        Args:
            post_id: Post UUID

        Returns:
            bool: True if a post was updated, False if it does not exist
        """
        statement = (
            update(PostDB)
            # pyrefly: ignore [bad-argument-type]
            .where(PostDB.id == post_id)
            .values(view_count=PostDB.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        return bool(result.rowcount)

    async def refresh_view_count(self, post: PostDB) -> None:
        await self.session.refresh(post, attribute_names=["view_count"])

    async def set_comments(self, post: PostDB, comments: list[dict[str, Any]]) -> PostDB:
        """Replace the embedded comment list of a post and flush."""
        return await self._save(post, {"comments": comments})

    async def lock_for_comment(self, post_id: UUID) -> PostDB | None:
        """
        Load a post with a row lock for the rest of the transaction.

        Serializes concurrent comment appends on PostgreSQL; other dialects
        ignore ``FOR UPDATE``.
        """
        statement = (
            select(PostDB)
            .options(*self.load_options())
            # pyrefly: ignore [bad-argument-type]
            .where(PostDB.id == post_id)
            .with_for_update()
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_image(self, post_id: UUID) -> StoredImage | None:
        """
        Fetch only the featured image columns of a post.

        Returns:
            StoredImage | None: The attachment, or None if the post does not
            exist or has no image
        """
        statement = select(
            PostDB.featured_image_data,
            PostDB.featured_image_content_type,
            PostDB.featured_image_filename,
        # pyrefly: ignore [bad-argument-type]
        ).where(PostDB.id == post_id)
        row = (await self.session.execute(statement)).one_or_none()
        if row is None or row[0] is None or row[1] is None:
            return None
        return StoredImage(data=row[0], content_type=row[1], filename=row[2])
