"""clients/gorest.py — Async HTTP client for the GoRest user-management API.

All persistent state lives upstream; this module only translates typed
operations into requests against ``public/v2`` and normalizes the outcome:

    2xx + valid JSON      -> pydantic model(s)
    2xx + bad/empty body  -> DeserializationError
    non-2xx               -> UpstreamError(status_code, body)
    no response           -> UpstreamUnavailableError

Retries are applied per operation via core.retry (get_user and delete_user
by default). List totals come from the X-Pagination-Total response header.

Usage:
    async with GoRestClient.from_settings(settings) as client:
        users, total = await client.list_users(page=1, per_page=20)
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Mapping, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from core.errors import (
    DeserializationError,
    UpstreamError,
    UpstreamUnavailableError,
    ValidationError,
    format_validation_errors,
)
from core.retry import RetryPolicy, Sleep, call_with_retry
from schemas.post import Post, PostCreate
from schemas.shared import DEFAULT_PER_PAGE, clamp_per_page
from schemas.todo import Todo, TodoCreate
from schemas.user import User, UserCreate, UserUpdate

logger = logging.getLogger(__name__)

API_PREFIX = "public/v2"
PAGINATION_TOTAL_HEADER = "X-Pagination-Total"
DEFAULT_TIMEOUT_SECONDS = 30.0

M = TypeVar("M", bound=BaseModel)

_USER_LIST = TypeAdapter(list[User])
_POST_LIST = TypeAdapter(list[Post])
_TODO_LIST = TypeAdapter(list[Todo])


def _coerce(model: Type[M], payload: Union[M, Mapping[str, Any]]) -> M:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_errors(exc.errors())) from exc


def parse_total_count(headers: Mapping[str, str]) -> int:
    """Read X-Pagination-Total; 0 when absent or not a non-negative integer."""
    raw = headers.get(PAGINATION_TOTAL_HEADER)
    if raw is None:
        return 0
    try:
        total = int(raw.strip())
    except ValueError:
        logger.warning("unparsable pagination header", extra={"value": raw})
        return 0
    return max(total, 0)


class GoRestClient:
    """Typed wrapper around the GoRest REST API.

    The bearer token is attached once, at construction, and never rotated.
    One instance is shared by the whole application (see api.main lifespan);
    it holds no per-request state.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.base_url = base_url
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        logger.info(
            "GoRestClient initialized",
            extra={
                "base_url": base_url,
                "authenticated": bool(token),
                "retry_operations": sorted(self.retry_policy.operations),
            },
        )

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "GoRestClient":
        return cls(
            settings.gorest_base_url,
            settings.gorest_token,
            timeout=settings.gorest_timeout_seconds,
            retry_policy=RetryPolicy.from_settings(settings),
            **kwargs,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "GoRestClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> httpx.Response:
        url = f"{API_PREFIX}/{path.lstrip('/')}"
        start = time.perf_counter()
        try:
            response = await self._http.request(method, url, params=params, json=json_body)
        except httpx.TransportError as exc:
            logger.warning(
                "upstream unreachable",
                extra={"method": method, "path": url, "error": repr(exc)},
            )
            raise UpstreamUnavailableError(repr(exc), method=method, path=url) from exc

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(
            "upstream request",
            extra={
                "method": method,
                "path": url,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        if not response.is_success:
            raise UpstreamError(response.status_code, response.text, method=method, path=url)
        return response

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            raise DeserializationError(
                f"empty response body from {response.request.method} {response.request.url.path}"
            )
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DeserializationError(f"response body is not valid JSON: {exc}") from exc

    def _parse_one(self, response: httpx.Response, model: Type[M]) -> M:
        document = self._decode(response)
        try:
            return model.model_validate(document)
        except PydanticValidationError as exc:
            raise DeserializationError(
                f"failed to deserialize {model.__name__}: {exc.error_count()} error(s)"
            ) from exc

    def _parse_many(self, response: httpx.Response, adapter: TypeAdapter) -> list:
        document = self._decode(response)
        try:
            return adapter.validate_python(document)
        except PydanticValidationError as exc:
            raise DeserializationError(
                f"failed to deserialize list: {exc.error_count()} error(s)"
            ) from exc

    async def _call(self, operation: str, fn):
        return await call_with_retry(operation, fn, self.retry_policy, self._sleep)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def list_users(
        self,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> tuple[list[User], int]:
        """Return one page of users and the upstream total count."""
        params = {"page": page, "per_page": clamp_per_page(per_page)}

        async def op():
            response = await self._request("GET", "users", params=params)
            return self._parse_many(response, _USER_LIST), parse_total_count(response.headers)

        return await self._call("list_users", op)

    async def get_user(self, user_id: int) -> User:
        async def op():
            response = await self._request("GET", f"users/{user_id}")
            return self._parse_one(response, User)

        return await self._call("get_user", op)

    async def create_user(self, payload: Union[UserCreate, Mapping[str, Any]]) -> User:
        body = _coerce(UserCreate, payload).model_dump(mode="json")

        async def op():
            response = await self._request("POST", "users", json_body=body)
            return self._parse_one(response, User)

        return await self._call("create_user", op)

    async def update_user(
        self,
        user_id: int,
        payload: Union[UserUpdate, Mapping[str, Any]],
    ) -> User:
        """PATCH the non-null fields the caller supplied (name, email, status)."""
        body = _coerce(UserUpdate, payload).model_dump(
            mode="json", exclude_unset=True, exclude_none=True
        )

        async def op():
            response = await self._request("PATCH", f"users/{user_id}", json_body=body)
            return self._parse_one(response, User)

        return await self._call("update_user", op)

    async def delete_user(self, user_id: int) -> None:
        async def op():
            await self._request("DELETE", f"users/{user_id}")

        await self._call("delete_user", op)

    # ------------------------------------------------------------------
    # Nested resources
    # ------------------------------------------------------------------

    async def list_user_posts(self, user_id: int) -> list[Post]:
        async def op():
            response = await self._request("GET", f"users/{user_id}/posts")
            return self._parse_many(response, _POST_LIST)

        return await self._call("list_user_posts", op)

    async def create_user_post(
        self,
        user_id: int,
        payload: Union[PostCreate, Mapping[str, Any]],
    ) -> Post:
        body = _coerce(PostCreate, payload).model_dump(mode="json")

        async def op():
            response = await self._request("POST", f"users/{user_id}/posts", json_body=body)
            return self._parse_one(response, Post)

        return await self._call("create_user_post", op)

    async def list_user_todos(self, user_id: int) -> list[Todo]:
        async def op():
            response = await self._request("GET", f"users/{user_id}/todos")
            return self._parse_many(response, _TODO_LIST)

        return await self._call("list_user_todos", op)

    async def create_user_todo(
        self,
        user_id: int,
        payload: Union[TodoCreate, Mapping[str, Any]],
    ) -> Todo:
        body = _coerce(TodoCreate, payload).model_dump(mode="json", exclude_none=True)

        async def op():
            response = await self._request("POST", f"users/{user_id}/todos", json_body=body)
            return self._parse_one(response, Todo)

        return await self._call("create_user_todo", op)
