"""
Post lifecycle orchestration.

``PostService`` composes the repositories with the slug generator, image
store, comment manager and ownership guard. The authenticated principal is
always passed in explicitly by the caller.
"""

from math import ceil
from re import compile
from uuid import UUID

from fastapi import UploadFile

from postdesk.auth import ensure_can_mutate
from postdesk.configs import settings
from postdesk.errors import DuplicateSlugError, RecordNotFoundError, ValidationError
from postdesk.models import CategoryDB, PostDB, UserDB
from postdesk.monitoring import get_logger
from postdesk.repositories import (
    CategoryRepository,
    PostFilter,
    PostRepository,
    StoredImage,
    UserRepository,
)
from postdesk.schemas import (
    AuthorSummary,
    CategorySummary,
    CommentResponse,
    FeaturedImageInfo,
    Pagination,
    PostCreate,
    PostDetail,
    PostListItem,
    PostUpdate,
    Principal,
)
from postdesk.services.comments import CommentManager
from postdesk.services.image_store import ImageStore
from postdesk.services.slug import SlugGenerator
from postdesk.utils import isoformat

logger = get_logger(__name__)

_UUID = compile(r"^[0-9a-fA-F]{8}-(?:[0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}$")

# Fields a patch may not clear
_REQUIRED_ON_UPDATE = ("title", "content", "category_id", "tags", "is_published")


def parse_post_id(value: str) -> UUID | None:
    """
    Parse a canonical (hyphenated) UUID, or return None.

    Examples
    --------
    >>> parse_post_id("hello-world") is None
    True
    """
    return UUID(value) if _UUID.match(value) else None


def post_not_found() -> RecordNotFoundError:
    return RecordNotFoundError("Post not found")


class PostService:
    """Implements the post operations exposed over HTTP."""

    def __init__(
        self,
        posts: PostRepository,
        categories: CategoryRepository,
        users: UserRepository,
        images: ImageStore | None = None,
    ) -> None:
        self.posts = posts
        self.categories = categories
        self.users = users
        self.images = images or ImageStore()
        self.slugs = SlugGenerator(posts)
        self.comments = CommentManager(posts, users)

    # ---- presentation ----

    async def _lookups(
        self,
        posts: list[PostDB],
    ) -> tuple[dict[UUID, UserDB], dict[UUID, CategoryDB]]:
        authors = await self.users.get_many({post.author_id for post in posts})
        categories = await self.categories.get_many({post.category_id for post in posts})
        return authors, categories

    @staticmethod
    def _list_item(
        post: PostDB,
        authors: dict[UUID, UserDB],
        categories: dict[UUID, CategoryDB],
    ) -> dict:
        author = authors.get(post.author_id)
        category = categories.get(post.category_id)
        image = None
        if post.featured_image_content_type is not None:
            image = FeaturedImageInfo(
                content_type=post.featured_image_content_type,
                filename=post.featured_image_filename,
            )
        return {
            "id": post.id,
            "title": post.title,
            "slug": post.slug,
            "content": post.content,
            "excerpt": post.excerpt,
            "tags": list(post.tags or []),
            "is_published": post.is_published,
            "view_count": post.view_count,
            "author": AuthorSummary(id=author.uuid, username=author.username) if author else None,
            "category": CategorySummary(id=category.id, name=category.name) if category else None,
            "has_featured_image": post.has_featured_image,
            "featured_image": image,
            "comment_count": len(post.comments or []),
            "created_at": isoformat(post.created_at),
            "updated_at": isoformat(post.updated_at),
        }

    async def present_list(self, posts: list[PostDB]) -> list[PostListItem]:
        authors, categories = await self._lookups(posts)
        return [PostListItem(**self._list_item(post, authors, categories)) for post in posts]

    async def present_detail(self, post: PostDB) -> PostDetail:
        authors, categories = await self._lookups([post])
        comments: list[CommentResponse] = await self.comments.render(post.comments or [])
        return PostDetail(
            **self._list_item(post, authors, categories),
            comments=comments,
            url=f"/posts/{post.slug}",
        )

    # ---- lookups ----

    async def _load(self, post_id: str) -> PostDB:
        parsed = parse_post_id(post_id)
        if parsed is None:
            raise post_not_found()
        return await self.posts.get_or_raise(parsed)

    async def _require_category(self, category_id: UUID) -> None:
        await self.categories.get_or_raise(category_id)

    # ---- operations ----

    async def list_posts(
        self,
        page: int,
        limit: int,
        category_id: UUID | None = None,
    ) -> tuple[list[PostListItem], Pagination]:
        """
        List published posts, newest first.

        Args:
            page: 1-indexed page number
            limit: Page size
            category_id: Optional category filter

        Returns:
            tuple[list[PostListItem], Pagination]: The page and its pagination block
        """
        posts, total = await self.posts.list_posts(
            PostFilter(is_published=True, category_id=category_id),
            skip=(page - 1) * limit,
            limit=limit,
        )
        pagination = Pagination(page=page, limit=limit, total=total, pages=ceil(total / limit))
        return await self.present_list(posts), pagination

    async def get(self, id_or_slug: str) -> PostDetail:
        """
        Get one post by id or slug and count the view.

        A canonical UUID is looked up as an id only; anything else as a slug.

        Raises:
            RecordNotFoundError: If no post matches
        """
        post_id = parse_post_id(id_or_slug)
        if post_id is not None:
            post = await self.posts.get_by_id(post_id)
        else:
            post = await self.posts.get_by_slug(id_or_slug)
        if post is None:
            raise post_not_found()

        await self.posts.increment_view(post.id)
        await self.posts.refresh_view_count(post)
        return await self.present_detail(post)

    async def image(self, post_id: str) -> StoredImage:
        """
        Return the raw featured image of a post.

        Raises:
            RecordNotFoundError: If the post or its image does not exist
        """
        parsed = parse_post_id(post_id)
        if parsed is None:
            raise post_not_found()
        return self.images.image_of(await self.posts.get_image(parsed))

    async def create(
        self,
        payload: PostCreate,
        principal: Principal,
        files: list[UploadFile] | None = None,
    ) -> PostDetail:
        """
        Create a post authored by ``principal``.

        The slug probe may lose a race with a concurrent create of the same
        title; the insert is then retried with a fresh slug up to
        ``SLUG_MAX_ATTEMPTS`` times before ``DuplicateSlugError`` surfaces.

        Raises:
            RecordNotFoundError: If the category does not exist
            DuplicateSlugError: If every attempt lost the slug race
            UploadError: If the attached image is rejected
        """
        await self._require_category(payload.category_id)
        attachment = await self.images.store_one(files or [])
        is_published = (
            payload.is_published
            if payload.is_published is not None
            else settings.POSTS_PUBLISHED_BY_DEFAULT
        )

        attempts = max(1, settings.SLUG_MAX_ATTEMPTS)
        for attempt in range(1, attempts + 1):
            post = PostDB(
                title=payload.title,
                slug=await self.slugs.ensure_unique_slug(payload.title),
                content=payload.content,
                excerpt=payload.excerpt,
                category_id=payload.category_id,
                author_id=principal.id,
                tags=list(payload.tags),
                is_published=is_published,
                view_count=0,
                comments=[],
                **(attachment.columns() if attachment else {}),
            )
            try:
                post = await self.posts.create(post)
            except DuplicateSlugError as e:
                if attempt == attempts:
                    raise
                logger.warning(f"Slug '{e.slug}' taken concurrently, retrying ({attempt}/{attempts})")
                continue
            logger.info(f"Post {post.id} created by {principal.username} with slug '{post.slug}'")
            return await self.present_detail(post)

        # Unreachable: the last failed attempt re-raises
        raise DuplicateSlugError(payload.title)

    async def update(
        self,
        post_id: str,
        patch: PostUpdate,
        principal: Principal,
        files: list[UploadFile] | None = None,
    ) -> PostDetail:
        """
        Apply a partial update.

        The slug changes only when the title changes and ``regenerateSlug``
        is set. A new upload replaces the image; ``removeFeaturedImage``
        clears it.

        Raises:
            RecordNotFoundError: If the post or the new category does not exist
            ForbiddenError: If ``principal`` is neither the author nor an admin
        """
        post = await self._load(post_id)
        ensure_can_mutate(post, principal)

        changes = patch.changes()
        for key in _REQUIRED_ON_UPDATE:
            if key in changes and changes[key] is None:
                del changes[key]

        if "category_id" in changes and changes["category_id"] != post.category_id:
            await self._require_category(changes["category_id"])

        title = changes.get("title")
        if patch.regenerate_slug and title is not None and title != post.title:
            changes["slug"] = await self.slugs.ensure_unique_slug(title, current=post.slug)

        attachment = await self.images.store_one(files or [])
        if attachment is not None:
            changes |= attachment.columns()
        elif patch.remove_featured_image:
            changes |= self.images.removal()

        post = await self.posts.update(post, changes)
        logger.info(f"Post {post.id} updated by {principal.username}: {sorted(changes)}")
        return await self.present_detail(post)

    async def delete(self, post_id: str, principal: Principal) -> None:
        """
        Delete a post and its embedded comments.

        Raises:
            RecordNotFoundError: If the post does not exist
            ForbiddenError: If ``principal`` is neither the author nor an admin
        """
        post = await self._load(post_id)
        ensure_can_mutate(post, principal)
        await self.posts.delete(post)
        logger.info(f"Post {post_id} deleted by {principal.username}")

    async def comment(
        self,
        post_id: str,
        principal: Principal,
        content: str,
    ) -> list[CommentResponse]:
        """
        Append a comment as ``principal``.

        Raises:
            ValidationError: If content is empty
            RecordNotFoundError: If the post does not exist
        """
        parsed = parse_post_id(post_id)
        if parsed is None:
            raise post_not_found()
        return await self.comments.append(parsed, principal.id, content)

    async def search(self, query: str | None) -> list[PostListItem]:
        """
        Substring search over published posts.

        Raises:
            ValidationError: If the query is missing or blank
        """
        text = (query or "").strip()
        if not text:
            mssg = "Search query is required"
            raise ValidationError(mssg)
        posts = await self.posts.search(text, limit=settings.SEARCH_RESULT_LIMIT)
        return await self.present_list(posts)
