# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from pathlib import Path
from tempfile import mkdtemp

# Point the engine at a throwaway SQLite file.
# This must happen before postdesk is imported anywhere.
_DB_DIR = Path(mkdtemp(prefix="postdesk-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR / 'postdesk.db'}"
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from io import BytesIO  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from postdesk.db import engine, transaction  # noqa: E402
from postdesk.main import app  # noqa: E402
from postdesk.managers import create_access_token, limiter  # noqa: E402
from postdesk.models import CategoryDB, PostDB, UserDB  # noqa: E402
from postdesk.schemas import Principal  # noqa: E402


async def _insert_user(username: str, role: str = "user") -> UserDB:
    """Insert a user row the way the authentication service would."""
    user = UserDB(username=username, email=f"{username}@example.com", role=role)
    async with transaction() as session:
        session.add(user)
    return user


def _bearer(user: UserDB) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.uuid, user.username)}"}


def _image_bytes(fmt: str = "PNG", size: tuple[int, int] = (64, 64)) -> bytes:
    """Encode a small solid-colour image with Pillow."""
    mode = "RGB" if fmt == "JPEG" else "RGBA"
    img = Image.new(mode, size, color="blue")
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
async def database() -> AsyncGenerator[None]:
    """Recreate every table so each test starts from an empty schema."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield


@pytest.fixture
async def session(database: None) -> AsyncGenerator[AsyncSession]:
    """A session committed when the test finishes."""
    async with transaction() as session:
        yield session


@pytest.fixture
async def author(database: None) -> UserDB:
    """Regular user who writes posts (U1)."""
    return await _insert_user("alice")


@pytest.fixture
async def other_user(database: None) -> UserDB:
    """Regular user who owns nothing (U2)."""
    return await _insert_user("bob")


@pytest.fixture
async def admin_user(database: None) -> UserDB:
    return await _insert_user("root", role="admin")


@pytest.fixture
async def category(database: None) -> CategoryDB:
    """A committed category to file posts under."""
    record = CategoryDB(name="Tech", slug="tech", description="Software and gadgets")
    async with transaction() as session:
        session.add(record)
    return record


@pytest.fixture
def make_post(author: UserDB, category: CategoryDB) -> Callable[..., Awaitable[PostDB]]:
    """
    Factory that commits a post row directly, bypassing slug generation.

    Defaults to a published post by ``author`` in ``category``.
    """

    async def _make(**fields: Any) -> PostDB:
        title = fields.pop("title", "Hello World")
        post = PostDB(
            title=title,
            slug=fields.pop("slug", title.lower().replace(" ", "-")),
            content=fields.pop("content", "Some content"),
            author_id=fields.pop("author_id", author.uuid),
            category_id=fields.pop("category_id", category.id),
            is_published=fields.pop("is_published", True),
            **fields,
        )
        async with transaction() as session:
            session.add(post)
        return post

    return _make


@pytest.fixture
def author_principal(author: UserDB) -> Principal:
    return Principal(id=author.uuid, username=author.username, role=author.role)


@pytest.fixture
def other_principal(other_user: UserDB) -> Principal:
    return Principal(id=other_user.uuid, username=other_user.username, role=other_user.role)


@pytest.fixture
def admin_principal(admin_user: UserDB) -> Principal:
    return Principal(id=admin_user.uuid, username=admin_user.username, role=admin_user.role)


@pytest.fixture
def auth_headers(author: UserDB) -> dict[str, str]:
    """Auth headers for the post author."""
    return _bearer(author)


@pytest.fixture
def other_auth_headers(other_user: UserDB) -> dict[str, str]:
    return _bearer(other_user)


@pytest.fixture
def admin_auth_headers(admin_user: UserDB) -> dict[str, str]:
    return _bearer(admin_user)


@pytest.fixture
async def client(database: None) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    return _image_bytes("PNG")


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    return _image_bytes("JPEG")
