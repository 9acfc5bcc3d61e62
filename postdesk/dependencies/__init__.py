from postdesk.dependencies.dependencies import (
    AdminDep,
    CategoryServiceDep,
    PostListQuery,
    PostListQueryDep,
    PostPayload,
    PostPayloadDep,
    PostServiceDep,
    PrincipalDep,
    SessionDep,
    get_current_principal,
    get_post_list_query,
    get_post_payload,
    get_post_service,
    require_admin,
)

__all__ = [
    "AdminDep",
    "CategoryServiceDep",
    "PostListQuery",
    "PostListQueryDep",
    "PostPayload",
    "PostPayloadDep",
    "PostServiceDep",
    "PrincipalDep",
    "SessionDep",
    "get_current_principal",
    "get_post_list_query",
    "get_post_payload",
    "get_post_service",
    "require_admin",
]
