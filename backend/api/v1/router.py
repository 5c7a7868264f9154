"""api/v1/router.py — Aggregates all v1 endpoint routers.

Included in api/main.py under the prefix /api/v1, so final paths are:
    /api/v1/users
    /api/v1/users/{id}
    /api/v1/users/{id}/posts
    /api/v1/users/{id}/todos
"""

from fastapi import APIRouter

from api.v1.endpoints import users

v1_router = APIRouter()

v1_router.include_router(users.router, prefix="/users", tags=["users"])
