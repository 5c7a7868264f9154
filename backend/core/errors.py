"""core/errors.py — Error taxonomy for the GoRest client layer.

    GoRestError
    ├── ValidationError           caller payload failed local shape checks (HTTP 400)
    ├── UpstreamError             upstream answered non-2xx (HTTP 500)
    │   └── UpstreamUnavailableError  no answer at all: connect error, timeout
    ├── DeserializationError      2xx with a missing or malformed body
    └── RetryExhaustedError       retry budget spent; wraps the last failure

The proxy layer catches GoRestError at the endpoint boundary and turns it
into the failure envelope, so none of these escape to the browser.
"""

from __future__ import annotations

from typing import Iterable, Optional

# Upstream bodies can be large HTML error pages; keep messages readable.
_MAX_BODY_IN_MESSAGE = 500


class GoRestError(Exception):
    """Base class for every failure raised by clients.gorest."""


class ValidationError(GoRestError):
    """Caller-submitted payload is missing required fields or has bad values."""

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "Invalid payload")


class UpstreamError(GoRestError):
    """The remote service answered with a non-2xx status."""

    def __init__(
        self,
        status_code: Optional[int],
        body: str = "",
        method: str = "",
        path: str = "",
    ):
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path
        super().__init__(self._describe())

    def _describe(self) -> str:
        body = self.body
        if len(body) > _MAX_BODY_IN_MESSAGE:
            body = body[:_MAX_BODY_IN_MESSAGE] + "..."
        target = f"{self.method} {self.path}".strip()
        prefix = f"{target}: " if target else ""
        summary = f"{prefix}upstream returned {self.status_code}"
        return f"{summary}: {body}" if body else summary


class UpstreamUnavailableError(UpstreamError):
    """The request never got a response (connection refused, DNS, timeout)."""

    def __init__(self, reason: str, method: str = "", path: str = ""):
        self.reason = reason
        super().__init__(None, "", method=method, path=path)

    def _describe(self) -> str:
        target = f"{self.method} {self.path}".strip()
        prefix = f"{target}: " if target else ""
        return f"{prefix}upstream unreachable: {self.reason}"


class DeserializationError(GoRestError):
    """A successful response carried no body or one that does not fit the model."""


class RetryExhaustedError(GoRestError):
    def __init__(self, operation: str, attempts: int, last_error: BaseException):
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{operation} failed after {attempts} attempts: {last_error}"
        )


def format_validation_errors(errors: Iterable[dict], skip: tuple = ()) -> list[str]:
    """Flatten pydantic error dicts into "field: message" strings.

    ``skip`` names the location prefixes FastAPI prepends ("body", "query",
    "path"); only the leading part is dropped, so a field called "body" survives.
    """
    messages = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] in skip:
            loc = loc[1:]
        field = ".".join(loc)
        messages.append(f"{field}: {err['msg']}" if field else err["msg"])
    return messages
