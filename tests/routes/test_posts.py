# tests/routes/test_posts.py
"""Tests for the post API endpoints."""

from collections.abc import Awaitable, Callable
from uuid import uuid4

import pytest
from httpx import AsyncClient

from postdesk.models import CategoryDB, PostDB
from postdesk.routes.posts import inline_disposition

MakePost = Callable[..., Awaitable[PostDB]]


def post_body(category: CategoryDB, /, **fields: object) -> dict:
    return {"title": "Hello World!!", "content": "My first post.", "category": str(category.id)} | fields


class TestScenario:
    """Walks a post from category creation through comments and a forbidden edit."""

    async def test_post_lifecycle(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        other_auth_headers: dict[str, str],
        admin_auth_headers: dict[str, str],
    ) -> None:
        response = await client.post("/categories", json={"name": "Tech"}, headers=admin_auth_headers)
        assert response.status_code == 201
        category = response.json()["data"]
        assert category["slug"] == "tech"

        body = {"title": "Hello World!!", "content": "My first post.", "category": category["id"]}
        response = await client.post("/posts", json=body, headers=auth_headers)
        assert response.status_code == 201
        first = response.json()["data"]
        assert first["slug"] == "hello-world"
        assert first["isPublished"] is False
        assert first["viewCount"] == 0
        assert first["author"]["username"] == "alice"
        assert first["category"] == {"id": category["id"], "name": "Tech"}

        response = await client.post("/posts", json=body, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["data"]["slug"] == "hello-world-1"

        response = await client.get("/posts/hello-world")
        assert response.status_code == 200
        assert response.json()["data"]["viewCount"] == 1

        response = await client.post(
            f"/posts/{first['id']}/comments",
            json={"content": "Nice post"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        comments = response.json()["data"]
        assert len(comments) == 1
        assert comments[0]["user"]["username"] == "alice"
        assert comments[0]["content"] == "Nice post"
        assert "createdAt" in comments[0]

        response = await client.put(
            f"/posts/{first['id']}",
            json={"title": "Hijacked"},
            headers=other_auth_headers,
        )
        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Not authorized to modify this post"}

        response = await client.get(f"/posts/{first['id']}")
        detail = response.json()["data"]
        assert detail["title"] == "Hello World!!"
        assert detail["viewCount"] == 2
        assert detail["commentCount"] == 1
        assert detail["url"] == "/posts/hello-world"


class TestListPosts:
    async def test_requires_authentication(self, client: AsyncClient) -> None:
        response = await client.get("/posts")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Not authenticated"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_invalid_token(self, client: AsyncClient) -> None:
        response = await client.get("/posts", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json()["error"] == "Could not validate credentials"

    async def test_lists_only_published_posts(
        self,
        client: AsyncClient,
        make_post: MakePost,
        auth_headers: dict[str, str],
    ) -> None:
        await make_post(title="Public")
        await make_post(title="Draft", is_published=False)

        response = await client.get("/posts", headers=auth_headers)

        assert response.status_code == 200
        payload = response.json()
        assert payload["success"] is True
        assert [item["title"] for item in payload["data"]] == ["Public"]
        assert payload["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}

    async def test_lenient_pagination(
        self,
        client: AsyncClient,
        make_post: MakePost,
        auth_headers: dict[str, str],
    ) -> None:
        for index in range(3):
            await make_post(title=f"Post {index}")

        response = await client.get("/posts?page=abc&limit=2", headers=auth_headers)

        payload = response.json()
        assert len(payload["data"]) == 2
        assert payload["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    async def test_invalid_category_filter(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
    ) -> None:
        response = await client.get("/posts?category=tech", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["success"] is False


class TestGetPost:
    async def test_unknown_slug(self, client: AsyncClient) -> None:
        response = await client.get("/posts/no-such-post")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Post not found"}

    async def test_unknown_id(self, client: AsyncClient) -> None:
        response = await client.get(f"/posts/{uuid4()}")

        assert response.status_code == 404


class TestCreatePost:
    async def test_requires_authentication(self, client: AsyncClient, category: CategoryDB) -> None:
        response = await client.post("/posts", json=post_body(category))

        assert response.status_code == 401

    async def test_missing_title(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
    ) -> None:
        body = post_body(category)
        del body["title"]

        response = await client.post("/posts", json=body, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "title: Field required"}

    async def test_oversized_title(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/posts",
            json=post_body(category, title="x" * 101),
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("title:")

    async def test_unknown_category(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/posts",
            json=post_body(category, category=str(uuid4())),
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Category not found"

    async def test_malformed_json(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        response = await client.post(
            "/posts",
            content=b"{not json",
            headers=auth_headers | {"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Request body must be valid JSON"

    async def test_tags_and_publish_flag(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
    ) -> None:
        response = await client.post(
            "/posts",
            json=post_body(category, tags=["python", "web"], isPublished=True, excerpt="Hi"),
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert data["tags"] == ["python", "web"]
        assert data["isPublished"] is True
        assert data["excerpt"] == "Hi"

    async def test_non_ascii_titles_get_fallback_slugs(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
    ) -> None:
        first = await client.post("/posts", json=post_body(category, title="你好世界"), headers=auth_headers)
        second = await client.post("/posts", json=post_body(category, title="Ελληνικά"), headers=auth_headers)

        assert first.status_code == 201
        assert first.json()["data"]["title"] == "你好世界"
        assert first.json()["data"]["slug"] == "post"
        assert second.status_code == 201
        assert second.json()["data"]["slug"] == "post-1"

        response = await client.get("/posts/post-1")
        assert response.json()["data"]["title"] == "Ελληνικά"


class TestFeaturedImage:
    async def test_multipart_round_trip(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
        valid_png_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/posts",
            data={
                "title": "Picture Post",
                "content": "Look at this",
                "category": str(category.id),
                "tags": "photo, blue",
                "isPublished": "true",
            },
            files={"featuredImage": ("cover.png", valid_png_bytes, "image/png")},
            headers=auth_headers,
        )
        assert response.status_code == 201
        created = response.json()["data"]
        assert created["hasFeaturedImage"] is True
        assert created["featuredImage"] == {"contentType": "image/png", "filename": "cover.png"}
        assert created["tags"] == ["photo", "blue"]

        response = await client.get(f"/posts/{created['id']}/image")
        assert response.status_code == 200
        assert response.content == valid_png_bytes
        assert response.headers["content-type"] == "image/png"
        assert 'filename="cover.png"' in response.headers["content-disposition"]

        detail = await client.get("/posts/picture-post")
        listing = await client.get("/posts", headers=auth_headers)
        for payload in (detail.json()["data"], listing.json()["data"][0]):
            assert payload["hasFeaturedImage"] is True
            assert "featuredImageData" not in payload
            assert "featured_image_data" not in payload
        # No base64-encoded PNG anywhere in the listing
        assert "iVBOR" not in listing.text

    async def test_non_ascii_filename_round_trips(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
        valid_png_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/posts",
            data={"title": "Encoded Name", "content": "Body", "category": str(category.id)},
            files={"featuredImage": ("图片.png", valid_png_bytes, "image/png")},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["featuredImage"]["filename"] == "图片.png"

        response = await client.get(f"/posts/{response.json()['data']['id']}/image")

        assert response.status_code == 200
        assert response.content == valid_png_bytes
        assert response.headers["content-type"] == "image/png"
        assert response.headers["content-disposition"] == "inline; filename*=utf-8''%E5%9B%BE%E7%89%87.png"

    async def test_rejects_mismatched_extension(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
        valid_png_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/posts",
            data={"title": "Bad", "content": "C", "category": str(category.id)},
            files={"featuredImage": ("cover.gif", valid_png_bytes, "image/png")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_rejects_two_images(
        self,
        client: AsyncClient,
        category: CategoryDB,
        auth_headers: dict[str, str],
        valid_png_bytes: bytes,
    ) -> None:
        response = await client.post(
            "/posts",
            data={"title": "Greedy", "content": "C", "category": str(category.id)},
            files=[
                ("featuredImage", ("a.png", valid_png_bytes, "image/png")),
                ("featuredImage", ("b.png", valid_png_bytes, "image/png")),
            ],
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Only one featured image may be uploaded per request"

    async def test_missing_image(self, client: AsyncClient, make_post: MakePost) -> None:
        post = await make_post(title="Bare")

        response = await client.get(f"/posts/{post.id}/image")

        assert response.status_code == 404
        assert response.json()["error"] == "Featured image not found"

    async def test_non_uuid_post_id(self, client: AsyncClient) -> None:
        response = await client.get("/posts/not-a-uuid/image")

        assert response.status_code == 404


class TestUpdatePost:
    async def test_author_updates_and_regenerates_slug(
        self,
        client: AsyncClient,
        make_post: MakePost,
        auth_headers: dict[str, str],
    ) -> None:
        post = await make_post(title="Original")

        response = await client.put(
            f"/posts/{post.id}",
            json={"title": "Brand New", "regenerateSlug": True},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Brand New"
        assert data["slug"] == "brand-new"

    async def test_remove_image_via_form(
        self,
        client: AsyncClient,
        make_post: MakePost,
        auth_headers: dict[str, str],
        valid_png_bytes: bytes,
    ) -> None:
        post = await make_post(
            title="Pictured",
            featured_image_data=valid_png_bytes,
            featured_image_content_type="image/png",
            featured_image_filename="cover.png",
        )

        response = await client.put(
            f"/posts/{post.id}",
            data={"removeFeaturedImage": "true"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["hasFeaturedImage"] is False
        assert (await client.get(f"/posts/{post.id}/image")).status_code == 404

    async def test_admin_may_update(
        self,
        client: AsyncClient,
        make_post: MakePost,
        admin_auth_headers: dict[str, str],
    ) -> None:
        post = await make_post(title="Original")

        response = await client.put(
            f"/posts/{post.id}",
            json={"isPublished": False},
            headers=admin_auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["isPublished"] is False

    async def test_unknown_post(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        response = await client.put(f"/posts/{uuid4()}", json={"title": "x"}, headers=auth_headers)

        assert response.status_code == 404


class TestDeletePost:
    async def test_other_user_forbidden(
        self,
        client: AsyncClient,
        make_post: MakePost,
        other_auth_headers: dict[str, str],
    ) -> None:
        post = await make_post(title="Kept")

        response = await client.delete(f"/posts/{post.id}", headers=other_auth_headers)

        assert response.status_code == 403
        assert (await client.get("/posts/kept")).status_code == 200

    async def test_author_deletes(
        self,
        client: AsyncClient,
        make_post: MakePost,
        auth_headers: dict[str, str],
    ) -> None:
        post = await make_post(title="Doomed")

        response = await client.delete(f"/posts/{post.id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Post deleted successfully"}
        assert (await client.get("/posts/doomed")).status_code == 404

    async def test_admin_deletes(
        self,
        client: AsyncClient,
        make_post: MakePost,
        admin_auth_headers: dict[str, str],
    ) -> None:
        post = await make_post(title="Moderated")

        response = await client.delete(f"/posts/{post.id}", headers=admin_auth_headers)

        assert response.status_code == 200


class TestComments:
    async def test_blank_comment(
        self,
        client: AsyncClient,
        make_post: MakePost,
        auth_headers: dict[str, str],
    ) -> None:
        post = await make_post(title="Quiet")

        response = await client.post(
            f"/posts/{post.id}/comments",
            json={"content": "   "},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("content:")

    async def test_unknown_post(self, client: AsyncClient, auth_headers: dict[str, str]) -> None:
        response = await client.post(
            f"/posts/{uuid4()}/comments",
            json={"content": "Hello?"},
            headers=auth_headers,
        )

        assert response.status_code == 404

    async def test_requires_authentication(self, client: AsyncClient, make_post: MakePost) -> None:
        post = await make_post(title="Quiet")

        response = await client.post(f"/posts/{post.id}/comments", json={"content": "Hi"})

        assert response.status_code == 401


class TestSearch:
    async def test_missing_query(self, client: AsyncClient) -> None:
        response = await client.get("/posts/search")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Search query is required"}

    async def test_matches_published_posts(self, client: AsyncClient, make_post: MakePost) -> None:
        await make_post(title="Python tips", tags=["python"])
        await make_post(title="Python draft", is_published=False)
        await make_post(title="Rust tips", tags=["rust"])

        response = await client.get("/posts/search", params={"q": "PYTHON"})

        assert response.status_code == 200
        assert [item["title"] for item in response.json()["data"]] == ["Python tips"]

    async def test_no_match(self, client: AsyncClient, make_post: MakePost) -> None:
        await make_post(title="Hello World")

        response = await client.get("/posts/search", params={"q": "xyz"})

        assert response.json() == {"success": True, "data": []}


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("cover.png", 'inline; filename="cover.png"'),
        ("图片.png", "inline; filename*=utf-8''%E5%9B%BE%E7%89%87.png"),
        ('my "best".png', "inline; filename*=utf-8''my%20%22best%22.png"),
    ],
)
def test_inline_disposition(filename: str, expected: str) -> None:
    assert inline_disposition(filename) == expected
