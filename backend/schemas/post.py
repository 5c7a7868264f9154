"""schemas/post.py — Posts nested under a GoRest user (public/v2/users/{id}/posts)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Post(BaseModel):
    # Content fields are passed through untouched.
    model_config = ConfigDict(from_attributes=False, extra="allow")

    id: int
    user_id: int
    title: str = ""
    body: str = ""


class PostCreate(BaseModel):
    model_config = ConfigDict(from_attributes=False, extra="ignore")

    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
