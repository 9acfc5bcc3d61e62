# postdesk/dependencies/dependencies.py

"""Application dependencies: sessions, repositories, services and the principal."""

from dataclasses import dataclass, field
from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Query, Request
from fastapi.security import OAuth2PasswordBearer
from orjson import JSONDecodeError, loads
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import FormData, UploadFile

from postdesk.configs import settings
from postdesk.db import get_session
from postdesk.errors import ForbiddenError, UserAuthenticationError, ValidationError
from postdesk.managers import decode_access_token
from postdesk.repositories import CategoryRepository, PostRepository, UserRepository
from postdesk.schemas import Principal
from postdesk.services import CategoryService, ImageStore, PostService
from postdesk.utils import positive_int

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

IMAGE_FIELD = "featuredImage"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_principal(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: SessionDep,
) -> Principal:
    """
    Resolve the authenticated principal from the bearer token.

    Parameters
    ----------
    token : str | None
        Bearer token, if sent.
    session : AsyncSession
        Database session.

    Returns
    -------
    Principal
        The user behind the token.

    Raises
    ------
    UserAuthenticationError
        If the token is missing, invalid, or names an unknown user.
    """
    if not token:
        mssg = "Not authenticated"
        raise UserAuthenticationError(mssg)

    token_data = decode_access_token(token)
    if not token_data:
        raise UserAuthenticationError

    user = await UserRepository(session).get_by_id(token_data.user_id)
    if not user:
        mssg = "User not found"
        raise UserAuthenticationError(mssg)

    return Principal(id=user.uuid, username=user.username, role=user.role)


PrincipalDep = Annotated[Principal, Depends(get_current_principal)]


async def require_admin(principal: PrincipalDep) -> Principal:
    """
    Dependency that requires the admin role.

    Raises
    ------
    ForbiddenError
        If the principal is not an admin.
    """
    if not principal.is_admin:
        mssg = "Admin access required"
        raise ForbiddenError(mssg)
    return principal


AdminDep = Annotated[Principal, Depends(require_admin)]


def get_post_service(session: SessionDep) -> PostService:
    """
    Resolve the `PostService` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    PostService
        Service bound to repositories sharing the request session.
    """
    return PostService(
        posts=PostRepository(session),
        categories=CategoryRepository(session),
        users=UserRepository(session),
        images=ImageStore(),
    )


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


def get_category_service(session: SessionDep) -> CategoryService:
    return CategoryService(CategoryRepository(session))


CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]


@dataclass(frozen=True)
class PostListQuery:
    """
    Query container for post listing.

    Parameters
    ----------
    page : int
        1-indexed page number.
    limit : int
        Page size, capped at ``POSTS_MAX_PAGE_SIZE``.
    category_id : UUID | None
        Optional category filter.
    """

    page: int = 1
    limit: int = 10
    category_id: UUID | None = None


def get_post_list_query(
    page: Annotated[str | None, Query(description="Page number (1-indexed)")] = None,
    limit: Annotated[str | None, Query(description="Posts per page")] = None,
    category: Annotated[str | None, Query(description="Optional category ID filter")] = None,
) -> PostListQuery:
    """
    Dependency to construct `PostListQuery` from query parameters.

    Non-numeric or non-positive ``page``/``limit`` values fall back to the
    defaults instead of failing.

    Raises
    ------
    ValidationError
        If ``category`` is not a valid id.
    """
    category_id = None
    if category:
        try:
            category_id = UUID(category)
        except ValueError as e:
            mssg = "category: Invalid category id"
            raise ValidationError(mssg) from e

    return PostListQuery(
        page=positive_int(page, 1),
        limit=min(
            positive_int(limit, settings.POSTS_DEFAULT_PAGE_SIZE),
            settings.POSTS_MAX_PAGE_SIZE,
        ),
        category_id=category_id,
    )


PostListQueryDep = Annotated[PostListQuery, Depends(get_post_list_query)]


@dataclass(frozen=True)
class PostPayload:
    """Raw post fields and the uploaded image files of a create/update request."""

    fields: dict[str, Any] = field(default_factory=dict)
    files: list[UploadFile] = field(default_factory=list)

    def validate[SchemaT: BaseModel](self, schema: type[SchemaT]) -> SchemaT:
        """
        Validate the fields against ``schema``.

        Raises
        ------
        ValidationError
            With the first failing field in the message.
        """
        try:
            return schema.model_validate(self.fields)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e


def _form_fields(form: FormData) -> PostPayload:
    fields: dict[str, Any] = {}
    files: list[UploadFile] = []
    for key in form:
        values = form.getlist(key)
        if key == IMAGE_FIELD:
            files.extend(value for value in values if isinstance(value, UploadFile) and value.filename)
            continue
        texts = [value for value in values if isinstance(value, str)]
        if texts:
            fields[key] = texts if len(texts) > 1 else texts[0]
    return PostPayload(fields=fields, files=files)


async def get_post_payload(request: Request) -> PostPayload:
    """
    Read a post body sent as JSON or as form/multipart data.

    Raises
    ------
    ValidationError
        If a JSON body is malformed or not an object.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        return _form_fields(await request.form())

    body = await request.body()
    if not body:
        return PostPayload()
    try:
        data = loads(body)
    except JSONDecodeError as e:
        mssg = "Request body must be valid JSON"
        raise ValidationError(mssg) from e
    if not isinstance(data, dict):
        mssg = "Request body must be a JSON object"
        raise ValidationError(mssg)
    return PostPayload(fields=data)


PostPayloadDep = Annotated[PostPayload, Depends(get_post_payload)]
