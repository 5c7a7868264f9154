"""schemas/user.py — GoRest user resource and write payloads.

Upstream source:
    GET/POST          public/v2/users
    GET/PATCH/DELETE  public/v2/users/{id}

GoRest only accepts lower-case enum values, so the write payloads fold
gender/status to lower case before validation ("Active" -> "active").
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


def _lower(v):
    return v.strip().lower() if isinstance(v, str) else v


class User(BaseModel):
    model_config = ConfigDict(from_attributes=False, extra="ignore")

    id: int
    name: str
    email: str
    gender: Gender
    status: UserStatus

    @field_validator("gender", "status", mode="before")
    @classmethod
    def _fold_case(cls, v):
        return _lower(v)


class UserCreate(BaseModel):
    model_config = ConfigDict(from_attributes=False, extra="ignore")

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    gender: Gender
    status: UserStatus

    @field_validator("gender", "status", mode="before")
    @classmethod
    def _fold_case(cls, v):
        return _lower(v)


class UserUpdate(BaseModel):
    """Partial update; only fields the caller sent are forwarded upstream.

    Gender is not updatable through the proxy and is dropped if present.
    """
    model_config = ConfigDict(from_attributes=False, extra="ignore")

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    status: Optional[UserStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def _fold_case(cls, v):
        return _lower(v)
