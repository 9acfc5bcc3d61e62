"""Tests for PostRepository query semantics."""

from asyncio import gather
from collections.abc import Awaitable, Callable
from uuid import UUID, uuid4

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from postdesk.db import transaction
from postdesk.errors import RecordNotFoundError
from postdesk.models import CategoryDB, PostDB
from postdesk.repositories import CategoryRepository, PostFilter, PostRepository, escape_like

MakePost = Callable[..., Awaitable[PostDB]]


async def _increment(post_id: UUID) -> bool:
    async with transaction() as session:
        return await PostRepository(session).increment_view(post_id)


def test_escape_like() -> None:
    assert escape_like("50%_off") == "50\\%\\_off"
    assert escape_like("back\\slash") == "back\\\\slash"
    assert escape_like("plain") == "plain"


class TestSlugsWithPrefix:
    async def test_returns_only_the_slug_family(
        self,
        session: AsyncSession,
        make_post: MakePost,
    ) -> None:
        await make_post(title="Hello World", slug="hello-world")
        await make_post(title="Hello World", slug="hello-world-1")
        await make_post(title="Hello Worldly", slug="hello-worldly")
        await make_post(title="Other", slug="other")

        taken = await PostRepository(session).slugs_with_prefix("hello-world")

        assert taken == {"hello-world", "hello-world-1"}

    async def test_underscores_match_literally(
        self,
        session: AsyncSession,
        make_post: MakePost,
    ) -> None:
        await make_post(title="a_b", slug="a_b")
        await make_post(title="axb", slug="axb-1")

        assert await PostRepository(session).slugs_with_prefix("a_b") == {"a_b"}

    async def test_category_slugs(self, session: AsyncSession, category: CategoryDB) -> None:
        assert await CategoryRepository(session).slugs_with_prefix("tech") == {"tech"}


class TestGetOrRaise:
    async def test_returns_existing_post(self, session: AsyncSession, make_post: MakePost) -> None:
        post = await make_post()

        found = await PostRepository(session).get_or_raise(post.id)

        assert found.slug == post.slug

    async def test_missing_records_use_entity_label(self, session: AsyncSession) -> None:
        with pytest.raises(RecordNotFoundError) as exc_info:
            await PostRepository(session).get_or_raise(uuid4())
        assert exc_info.value.detail == "Post not found"

        with pytest.raises(RecordNotFoundError) as exc_info:
            await CategoryRepository(session).get_or_raise(uuid4())
        assert exc_info.value.detail == "Category not found"


class TestListPosts:
    async def test_default_filter_hides_drafts(
        self,
        session: AsyncSession,
        make_post: MakePost,
    ) -> None:
        await make_post(title="Public")
        await make_post(title="Draft", is_published=False)

        posts, total = await PostRepository(session).list_posts(PostFilter())

        assert [post.title for post in posts] == ["Public"]
        assert total == 1

    async def test_unfiltered_includes_drafts(
        self,
        session: AsyncSession,
        make_post: MakePost,
    ) -> None:
        await make_post(title="Public")
        await make_post(title="Draft", is_published=False)

        _, total = await PostRepository(session).list_posts(PostFilter(is_published=None))

        assert total == 2

    async def test_skip_and_limit(self, session: AsyncSession, make_post: MakePost) -> None:
        for index in range(4):
            await make_post(title=f"Post {index}")

        posts, total = await PostRepository(session).list_posts(PostFilter(), skip=1, limit=2)

        assert [post.title for post in posts] == ["Post 2", "Post 1"]
        assert total == 4


class TestSearch:
    async def test_matches_title_content_and_tags(
        self,
        session: AsyncSession,
        make_post: MakePost,
    ) -> None:
        await make_post(title="Learning PYTHON")
        await make_post(title="Cooking", content="A python-shaped cake")
        await make_post(title="Tagged", tags=["python", "web"])
        await make_post(title="Unrelated", tags=["rust"])

        posts = await PostRepository(session).search("python")

        assert {post.title for post in posts} == {"Learning PYTHON", "Cooking", "Tagged"}

    async def test_excludes_drafts(self, session: AsyncSession, make_post: MakePost) -> None:
        await make_post(title="Python draft", is_published=False)

        assert await PostRepository(session).search("python") == []

    async def test_no_match_returns_empty_list(
        self,
        session: AsyncSession,
        make_post: MakePost,
    ) -> None:
        await make_post(title="Hello World", content="Greetings", tags=["intro"])

        assert await PostRepository(session).search("xyz") == []

    async def test_wildcards_match_literally(
        self,
        session: AsyncSession,
        make_post: MakePost,
    ) -> None:
        await make_post(title="100% pure")
        await make_post(title="Plain")

        posts = await PostRepository(session).search("%")

        assert [post.title for post in posts] == ["100% pure"]

    async def test_non_ascii_tag(self, session: AsyncSession, make_post: MakePost) -> None:
        await make_post(title="Trip", tags=["café"])

        posts = await PostRepository(session).search("café")

        assert [post.title for post in posts] == ["Trip"]

    async def test_respects_limit(self, session: AsyncSession, make_post: MakePost) -> None:
        for index in range(3):
            await make_post(title=f"Python {index}")

        assert len(await PostRepository(session).search("python", limit=2)) == 2


class TestImageColumns:
    async def test_entity_queries_defer_image_bytes(
        self,
        session: AsyncSession,
        make_post: MakePost,
        valid_png_bytes: bytes,
    ) -> None:
        await make_post(
            title="With Image",
            featured_image_data=valid_png_bytes,
            featured_image_content_type="image/png",
            featured_image_filename="cover.png",
        )

        post = await PostRepository(session).get_by_slug("with-image")

        assert post is not None
        assert post.has_featured_image is True
        assert "featured_image_data" in inspect(post).unloaded

    async def test_get_image(
        self,
        session: AsyncSession,
        make_post: MakePost,
        valid_png_bytes: bytes,
    ) -> None:
        post = await make_post(
            title="With Image",
            featured_image_data=valid_png_bytes,
            featured_image_content_type="image/png",
            featured_image_filename="cover.png",
        )

        image = await PostRepository(session).get_image(post.id)

        assert image is not None
        assert image.data == valid_png_bytes
        assert image.content_type == "image/png"
        assert image.filename == "cover.png"

    async def test_get_image_without_attachment(
        self,
        session: AsyncSession,
        make_post: MakePost,
    ) -> None:
        post = await make_post(title="Bare")
        repository = PostRepository(session)

        assert await repository.get_image(post.id) is None
        assert await repository.get_image(uuid4()) is None


class TestIncrementView:
    async def test_missing_post(self, database: None) -> None:
        assert await _increment(uuid4()) is False

    @pytest.mark.parametrize("readers", [1, 8])
    async def test_concurrent_increments_are_not_lost(
        self,
        make_post: MakePost,
        readers: int,
    ) -> None:
        post = await make_post(title="Popular")

        results = await gather(*(_increment(post.id) for _ in range(readers)))

        assert all(results)
        async with transaction() as session:
            stored = await PostRepository(session).get_by_id(post.id)
        assert stored is not None
        assert stored.view_count == readers
