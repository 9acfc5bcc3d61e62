# postdesk/routes/posts.py

"""
Post Routes.

Provides the post lifecycle endpoints: listing, search, detail by id or
slug, raw featured image bytes, create, update, delete, and comments.

Summary
-------
Endpoints include:
  - List published posts (paginated, optional category filter)
  - Search published posts
  - Get post by id or slug (counts a view)
  - Get featured image bytes
  - Create post (JSON or multipart with ``featuredImage``)
  - Update post (author or admin)
  - Delete post (author or admin)
  - Add comment

Dependencies
------------
  - `PostServiceDep`: Post service bound to the request session.
  - `PrincipalDep`: Authenticated principal for protected operations.

Rate Limiting
-------------
Reads are limited to ``READ_LIMIT`` and writes to ``WRITE_LIMIT`` per client
(API key when ``X-API-Key`` is sent, IP address otherwise).
"""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Body, Query, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from postdesk.dependencies import (
    PostListQueryDep,
    PostPayloadDep,
    PostServiceDep,
    PrincipalDep,
)
from postdesk.managers import READ_LIMIT, WRITE_LIMIT, limiter
from postdesk.schemas import (
    CommentCreate,
    CommentResponse,
    DataResponse,
    MessageResponse,
    PageResponse,
    PostCreate,
    PostDetail,
    PostListItem,
    PostUpdate,
)

router = APIRouter(prefix="/posts", tags=["📝 Posts"])

ERROR_RESPONSES: dict[int | str, dict] = {
    400: {
        "description": "Bad request",
        "content": {"application/json": {"example": {"success": False, "error": "title: Field required"}}},
    },
    401: {
        "description": "Not authenticated",
        "content": {"application/json": {"example": {"success": False, "error": "Not authenticated"}}},
    },
    403: {
        "description": "Forbidden",
        "content": {
            "application/json": {
                "example": {"success": False, "error": "Not authorized to modify this post"},
            },
        },
    },
    404: {
        "description": "Not found",
        "content": {"application/json": {"example": {"success": False, "error": "Post not found"}}},
    },
    429: {
        "description": "Rate limit exceeded",
        "content": {
            "application/json": {
                "example": {"success": False, "error": "Rate limit exceeded: 30 per 1 minute"},
            },
        },
    },
}


def _responses(*codes: int) -> dict[int | str, dict]:
    return {code: ERROR_RESPONSES[code] for code in codes}


def inline_disposition(filename: str) -> str:
    """
    Build an inline ``Content-Disposition`` value for a stored filename.

    Header values are latin-1 on the wire, so names that need quoting use
    the RFC 5987 ``filename*`` form, as Starlette's ``FileResponse`` does.
    """
    quoted = quote(filename)
    if quoted != filename:
        return f"inline; filename*=utf-8''{quoted}"
    return f'inline; filename="{filename}"'


POST_FORM_DOC = {
    "requestBody": {
        "content": {
            "application/json": {
                "example": {
                    "title": "Hello World!!",
                    "content": "My first post.",
                    "excerpt": "A short hello",
                    "category": "9b2f0d1c-4a57-4c5e-8a3b-0f6f2e7d1a11",
                    "tags": ["intro", "meta"],
                    "isPublished": True,
                },
            },
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string"},
                        "content": {"type": "string"},
                        "excerpt": {"type": "string"},
                        "category": {"type": "string", "format": "uuid"},
                        "tags": {"type": "string", "description": "Comma-separated"},
                        "isPublished": {"type": "string", "enum": ["true", "false"]},
                        "removeFeaturedImage": {"type": "string", "enum": ["true", "false"]},
                        "regenerateSlug": {"type": "string", "enum": ["true", "false"]},
                        "featuredImage": {"type": "string", "format": "binary"},
                    },
                },
            },
        },
    },
}


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=PageResponse[PostListItem],
    summary="List published posts",
    description="Paginated list of published posts, newest first. Image bytes are never included.",
    responses=_responses(401, 429),
    operation_id="posts_list",
)
@limiter.limit(READ_LIMIT)
async def list_posts(
    request: Request,
    query: PostListQueryDep,
    service: PostServiceDep,
    principal: PrincipalDep,
) -> PageResponse[PostListItem]:
    """
    List published posts.

    Parameters
    ----------
    request : Request
        Current request context.
    query : PostListQuery
        Page, page size and optional category filter.
    service : PostService
        Post service dependency.
    principal : Principal
        Authenticated caller.

    Returns
    -------
    PageResponse[PostListItem]
        The page and its pagination block.
    """
    items, pagination = await service.list_posts(query.page, query.limit, query.category_id)
    return PageResponse[PostListItem](data=items, pagination=pagination)


@router.get(
    "/search",
    response_class=ORJSONResponse,
    response_model=DataResponse[list[PostListItem]],
    summary="Search published posts",
    description="Case-insensitive substring match on title, content or tags.",
    responses=_responses(400, 429),
    operation_id="posts_search",
)
@limiter.limit(READ_LIMIT)
async def search_posts(
    request: Request,
    service: PostServiceDep,
    q: Annotated[str | None, Query(description="Search text")] = None,
) -> DataResponse[list[PostListItem]]:
    """
    Search published posts.

    Parameters
    ----------
    request : Request
        Current request context.
    service : PostService
        Post service dependency.
    q : str | None
        Search text; required.

    Returns
    -------
    DataResponse[list[PostListItem]]
        Up to ``SEARCH_RESULT_LIMIT`` matches, newest first.

    Raises
    ------
    ValidationError
        If ``q`` is missing or blank.
    """
    return DataResponse[list[PostListItem]](data=await service.search(q))


@router.get(
    "/{id_or_slug}",
    response_class=ORJSONResponse,
    response_model=DataResponse[PostDetail],
    summary="Get post by id or slug",
    description="Retrieve one post with its comments. Counts a view.",
    responses=_responses(404, 429),
    operation_id="posts_get",
)
@limiter.limit(READ_LIMIT)
async def get_post(
    request: Request,
    id_or_slug: str,
    service: PostServiceDep,
) -> DataResponse[PostDetail]:
    """
    Get a post and increment its view count.

    Parameters
    ----------
    request : Request
        Current request context.
    id_or_slug : str
        Post UUID or slug.
    service : PostService
        Post service dependency.

    Returns
    -------
    DataResponse[PostDetail]
        The post.
    """
    return DataResponse[PostDetail](data=await service.get(id_or_slug))


@router.get(
    "/{post_id}/image",
    response_class=Response,
    summary="Get featured image",
    description="Raw featured image bytes with their stored Content-Type.",
    responses={
        200: {"content": {"image/*": {}}, "description": "Image bytes"},
        **_responses(404, 429),
    },
    operation_id="posts_image",
)
@limiter.limit(READ_LIMIT)
async def get_post_image(
    request: Request,
    post_id: str,
    service: PostServiceDep,
) -> Response:
    """
    Stream a post's featured image.

    Parameters
    ----------
    request : Request
        Current request context.
    post_id : str
        Post UUID.
    service : PostService
        Post service dependency.

    Returns
    -------
    Response
        Image bytes.
    """
    image = await service.image(post_id)
    headers = {}
    if image.filename:
        headers["Content-Disposition"] = inline_disposition(image.filename)
    return Response(content=image.data, media_type=image.content_type, headers=headers)


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=DataResponse[PostDetail],
    status_code=HTTP_201_CREATED,
    summary="Create a post",
    description="Create a post as the authenticated user. Send multipart to attach a featured image.",
    responses=_responses(400, 401, 404, 429),
    openapi_extra=POST_FORM_DOC,
    operation_id="posts_create",
)
@limiter.limit(WRITE_LIMIT)
async def create_post(
    request: Request,
    payload: PostPayloadDep,
    service: PostServiceDep,
    principal: PrincipalDep,
) -> DataResponse[PostDetail]:
    """
    Create a new post.

    Parameters
    ----------
    request : Request
        Current request context.
    payload : PostPayload
        Post fields and uploaded files.
    service : PostService
        Post service dependency.
    principal : Principal
        Author of the new post.

    Returns
    -------
    DataResponse[PostDetail]
        The created post.
    """
    post = await service.create(payload.validate(PostCreate), principal, payload.files)
    return DataResponse[PostDetail](data=post)


@router.put(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=DataResponse[PostDetail],
    summary="Update a post",
    description="Partial update. Only the author or an admin may update a post.",
    responses=_responses(400, 401, 403, 404, 429),
    openapi_extra=POST_FORM_DOC,
    operation_id="posts_update",
)
@limiter.limit(WRITE_LIMIT)
async def update_post(
    request: Request,
    post_id: str,
    payload: PostPayloadDep,
    service: PostServiceDep,
    principal: PrincipalDep,
) -> DataResponse[PostDetail]:
    """
    Update a post.

    Parameters
    ----------
    request : Request
        Current request context.
    post_id : str
        Post UUID.
    payload : PostPayload
        Changed fields and an optional replacement image.
    service : PostService
        Post service dependency.
    principal : Principal
        Caller; must be the author or an admin.

    Returns
    -------
    DataResponse[PostDetail]
        The updated post.
    """
    post = await service.update(post_id, payload.validate(PostUpdate), principal, payload.files)
    return DataResponse[PostDetail](data=post)


@router.delete(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a post",
    description="Delete a post and its comments. Only the author or an admin may delete a post.",
    responses=_responses(401, 403, 404, 429),
    operation_id="posts_delete",
)
@limiter.limit(WRITE_LIMIT)
async def delete_post(
    request: Request,
    post_id: str,
    service: PostServiceDep,
    principal: PrincipalDep,
) -> MessageResponse:
    """
    Delete a post.

    Parameters
    ----------
    request : Request
        Current request context.
    post_id : str
        Post UUID.
    service : PostService
        Post service dependency.
    principal : Principal
        Caller; must be the author or an admin.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    await service.delete(post_id, principal)
    return MessageResponse(message="Post deleted successfully")


@router.post(
    "/{post_id}/comments",
    response_class=ORJSONResponse,
    response_model=DataResponse[list[CommentResponse]],
    status_code=HTTP_201_CREATED,
    summary="Add a comment",
    description="Append a comment and return the post's full comment list.",
    responses=_responses(400, 401, 404, 429),
    operation_id="posts_comment",
)
@limiter.limit(WRITE_LIMIT)
async def add_comment(
    request: Request,
    post_id: str,
    comment: Annotated[
        CommentCreate,
        Body(examples=[{"content": "Great post!"}]),
    ],
    service: PostServiceDep,
    principal: PrincipalDep,
) -> DataResponse[list[CommentResponse]]:
    """
    Add a comment to a post.

    Parameters
    ----------
    request : Request
        Current request context.
    post_id : str
        Post UUID.
    comment : CommentCreate
        Comment text.
    service : PostService
        Post service dependency.
    principal : Principal
        Comment author.

    Returns
    -------
    DataResponse[list[CommentResponse]]
        Every comment on the post, oldest first.
    """
    comments = await service.comment(post_id, principal, comment.content)
    return DataResponse[list[CommentResponse]](data=comments)
