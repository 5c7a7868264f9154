"""schemas/shared.py — Pagination and response-envelope building blocks."""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


def clamp_per_page(per_page: int) -> int:
    """Cap a requested page size at MAX_PER_PAGE."""
    return min(per_page, MAX_PER_PAGE)


def total_pages(total_count: int, per_page: int) -> int:
    return math.ceil(total_count / per_page) if total_count > 0 else 0


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=False,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PaginationParams(_CamelModel):
    page: int = Field(1, ge=1)
    per_page: int = Field(DEFAULT_PER_PAGE, ge=1)

    @field_validator("per_page")
    @classmethod
    def _clamp(cls, v: int) -> int:
        return clamp_per_page(v)


class PaginationMeta(_CamelModel):
    current_page: int
    per_page: int
    total_count: int
    total_pages: int

    @classmethod
    def build(cls, params: PaginationParams, total_count: int) -> "PaginationMeta":
        return cls(
            current_page=params.page,
            per_page=params.per_page,
            total_count=total_count,
            total_pages=total_pages(total_count, params.per_page),
        )


# ---------------------------------------------------------------------------
# Envelopes: every proxy endpoint answers with one of these shapes
# ---------------------------------------------------------------------------

class FailureEnvelope(_CamelModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    request_id: str


class ValidationFailureEnvelope(_CamelModel):
    success: bool = False
    message: str = "Invalid request data"
    errors: list[str]
    request_id: str
