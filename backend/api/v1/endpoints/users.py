"""api/v1/endpoints/users.py — User endpoints proxied to GoRest.

Routes:
    GET    /users                 Paginated list; query: page, perPage (capped at 100)
    GET    /users/{id}            Single user (retried upstream)
    POST   /users                 Create user -> 201
    PUT    /users/{id}            Partial update (PATCH upstream)
    DELETE /users/{id}            Delete user (retried upstream)
    GET    /users/{id}/posts      Posts of a user
    POST   /users/{id}/posts      Create post -> 201
    GET    /users/{id}/todos      Todos of a user
    POST   /users/{id}/todos      Create todo -> 201

Every handler performs exactly one client operation. Client-layer failures
become a 500 failure envelope here; malformed requests never reach the
handler and are answered with 400 by the RequestValidationError handler in
api/main.py.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_gorest_client
from api.envelope import success, upstream_failure
from clients.gorest import GoRestClient
from core.errors import GoRestError
from schemas.post import PostCreate
from schemas.shared import DEFAULT_PER_PAGE, PaginationMeta, PaginationParams
from schemas.todo import TodoCreate
from schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", summary="List users")
async def list_users(
    request: Request,
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(
        DEFAULT_PER_PAGE, ge=1, alias="perPage", description="Results per page (max 100)"
    ),
    client: GoRestClient = Depends(get_gorest_client),
):
    params = PaginationParams(page=page, per_page=per_page)
    try:
        users, total_count = await client.list_users(params.page, params.per_page)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to fetch users", exc)

    return success(users, pagination=PaginationMeta.build(params, total_count))


@router.get("/{user_id}", summary="Get user")
async def get_user(
    request: Request,
    user_id: int,
    client: GoRestClient = Depends(get_gorest_client),
):
    try:
        user = await client.get_user(user_id)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to fetch user", exc)
    return success(user)


@router.post("", status_code=201, summary="Create user")
async def create_user(
    request: Request,
    payload: UserCreate,
    client: GoRestClient = Depends(get_gorest_client),
):
    try:
        user = await client.create_user(payload)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to create user", exc)

    logger.info("user created", extra={"user_id": user.id})
    return success(user, status_code=201)


@router.put("/{user_id}", summary="Update user")
async def update_user(
    request: Request,
    user_id: int,
    payload: UserUpdate,
    client: GoRestClient = Depends(get_gorest_client),
):
    try:
        user = await client.update_user(user_id, payload)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to update user", exc)
    return success(user)


@router.delete("/{user_id}", summary="Delete user")
async def delete_user(
    request: Request,
    user_id: int,
    client: GoRestClient = Depends(get_gorest_client),
):
    try:
        await client.delete_user(user_id)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to delete user", exc)

    logger.info("user deleted", extra={"user_id": user_id})
    return success()


# ---------------------------------------------------------------------------
# Nested resources
# ---------------------------------------------------------------------------

@router.get("/{user_id}/posts", summary="List a user's posts")
async def list_user_posts(
    request: Request,
    user_id: int,
    client: GoRestClient = Depends(get_gorest_client),
):
    try:
        posts = await client.list_user_posts(user_id)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to fetch posts", exc)
    return success(posts)


@router.post("/{user_id}/posts", status_code=201, summary="Create a post for a user")
async def create_user_post(
    request: Request,
    user_id: int,
    payload: PostCreate,
    client: GoRestClient = Depends(get_gorest_client),
):
    try:
        post = await client.create_user_post(user_id, payload)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to create post", exc)
    return success(post, status_code=201)


@router.get("/{user_id}/todos", summary="List a user's todos")
async def list_user_todos(
    request: Request,
    user_id: int,
    client: GoRestClient = Depends(get_gorest_client),
):
    try:
        todos = await client.list_user_todos(user_id)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to fetch todos", exc)
    return success(todos)


@router.post("/{user_id}/todos", status_code=201, summary="Create a todo for a user")
async def create_user_todo(
    request: Request,
    user_id: int,
    payload: TodoCreate,
    client: GoRestClient = Depends(get_gorest_client),
):
    try:
        todo = await client.create_user_todo(user_id, payload)
    except GoRestError as exc:
        return upstream_failure(request, "Failed to create todo", exc)
    return success(todo, status_code=201)
