from schemas.shared import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    FailureEnvelope,
    PaginationMeta,
    PaginationParams,
    ValidationFailureEnvelope,
    clamp_per_page,
    total_pages,
)
from schemas.user import Gender, User, UserCreate, UserStatus, UserUpdate
from schemas.post import Post, PostCreate
from schemas.todo import Todo, TodoCreate, TodoStatus

__all__ = [
    "DEFAULT_PER_PAGE", "MAX_PER_PAGE", "clamp_per_page", "total_pages",
    "PaginationParams", "PaginationMeta",
    "FailureEnvelope", "ValidationFailureEnvelope",
    "Gender", "UserStatus", "User", "UserCreate", "UserUpdate",
    "Post", "PostCreate",
    "Todo", "TodoStatus", "TodoCreate",
]
