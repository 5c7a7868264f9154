"""schemas/todo.py — Todos nested under a GoRest user (public/v2/users/{id}/todos)."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TodoStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


def _lower(v):
    return v.strip().lower() if isinstance(v, str) else v


class Todo(BaseModel):
    model_config = ConfigDict(from_attributes=False, extra="ignore")

    id: int
    user_id: int
    title: str
    status: TodoStatus
    due_on: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _fold_case(cls, v):
        return _lower(v)


class TodoCreate(BaseModel):
    model_config = ConfigDict(from_attributes=False, extra="ignore")

    title: str = Field(..., min_length=1)
    status: TodoStatus = TodoStatus.PENDING
    due_on: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _fold_case(cls, v):
        return _lower(v)
