# postdesk/routes/categories.py

"""
Category Routes.

Categories are a small named-entity store that posts reference. Anyone may
list them; only admins may create them.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from postdesk.dependencies import AdminDep, CategoryServiceDep
from postdesk.managers import READ_LIMIT, WRITE_LIMIT, limiter
from postdesk.schemas import CategoryCreate, CategoryResponse, DataResponse

router = APIRouter(prefix="/categories", tags=["🗂️ Categories"])


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=DataResponse[list[CategoryResponse]],
    summary="List categories",
    description="All categories sorted by name.",
    operation_id="categories_list",
)
@limiter.limit(READ_LIMIT)
async def list_categories(
    request: Request,
    service: CategoryServiceDep,
) -> DataResponse[list[CategoryResponse]]:
    """
    List categories.

    Parameters
    ----------
    request : Request
        Current request context.
    service : CategoryService
        Category service dependency.

    Returns
    -------
    DataResponse[list[CategoryResponse]]
        Every category.
    """
    return DataResponse[list[CategoryResponse]](data=await service.list_all())


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=DataResponse[CategoryResponse],
    status_code=HTTP_201_CREATED,
    summary="Create a category",
    description="Create a category; its slug is derived from the name. Admins only.",
    responses={
        400: {
            "description": "Bad request",
            "content": {
                "application/json": {
                    "example": {"success": False, "error": "Category with this name already exists"},
                },
            },
        },
        403: {
            "description": "Forbidden",
            "content": {"application/json": {"example": {"success": False, "error": "Admin access required"}}},
        },
    },
    operation_id="categories_create",
)
@limiter.limit(WRITE_LIMIT)
async def create_category(
    request: Request,
    category: Annotated[
        CategoryCreate,
        Body(examples=[{"name": "Technology", "description": "Software, gadgets and the web"}]),
    ],
    service: CategoryServiceDep,
    admin: AdminDep,
) -> DataResponse[CategoryResponse]:
    """
    Create a category.

    Parameters
    ----------
    request : Request
        Current request context.
    category : CategoryCreate
        Name and optional description.
    service : CategoryService
        Category service dependency.
    admin : Principal
        Authenticated admin.

    Returns
    -------
    DataResponse[CategoryResponse]
        The created category.
    """
    return DataResponse[CategoryResponse](data=await service.create(category))
