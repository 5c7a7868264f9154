"""
Tests for app wiring: health routes, settings, error messages and the
request-id log filter.
"""

import logging

import pytest

from core.config import APP_VERSION, Settings
from core.errors import RetryExhaustedError, UpstreamError, UpstreamUnavailableError
from core.logging import RequestIdFilter, request_id_var

USERS = "/public/v2/users"


class TestHealth:

    def test_root(self, api):
        resp = api.get("/")
        assert resp.status_code == 200
        assert resp.json()["docs"] == "/docs"
        assert resp.json()["version"] == APP_VERSION

    def test_liveness(self, api):
        body = api.get("/health").json()
        assert body["status"] == "ok"
        assert "timestamp" in body
        assert body["version"] == APP_VERSION

    def test_upstream_reachable(self, api, upstream):
        upstream.respond("GET", USERS, json=[], headers={"X-Pagination-Total": "3000"})
        resp = api.get("/health/upstream")
        assert resp.status_code == 200
        assert resp.json()["total_users"] == 3000
        assert upstream.requests[0].url.params["per_page"] == "1"

    def test_upstream_down(self, api, upstream):
        upstream.fail("GET", USERS)
        resp = api.get("/health/upstream")
        assert resp.status_code == 503
        assert resp.json()["status"] == "error"


class TestSettings:

    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.gorest_base_url == "https://gorest.co.in/"
        assert s.gorest_timeout_seconds == 30.0
        assert s.retry_max_attempts == 3
        assert s.retry_operations == ["get_user", "delete_user"]

    def test_log_level_upper_cased(self):
        assert Settings(_env_file=None, log_level="info").log_level == "INFO"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("GOREST_TOKEN", "secret")
        monkeypatch.setenv("RETRY_OPERATIONS", '["get_user"]')
        s = Settings(_env_file=None)
        assert s.gorest_token == "secret"
        assert s.retry_operations == ["get_user"]

    def test_zero_attempts_rejected(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, retry_max_attempts=0)


class TestErrorMessages:

    def test_upstream_error_includes_status_and_body(self):
        err = UpstreamError(404, '{"message":"Resource not found"}', method="GET", path="public/v2/users/9")
        assert str(err) == 'GET public/v2/users/9: upstream returned 404: {"message":"Resource not found"}'

    def test_upstream_error_without_body(self):
        assert str(UpstreamError(500)) == "upstream returned 500"

    def test_long_bodies_truncated_in_message(self):
        err = UpstreamError(502, "x" * 2000)
        assert len(str(err)) < 600
        assert len(err.body) == 2000

    def test_unavailable_is_an_upstream_error(self):
        err = UpstreamUnavailableError("ConnectError('refused')")
        assert isinstance(err, UpstreamError)
        assert err.status_code is None

    def test_retry_exhausted_wraps_last_error(self):
        last = UpstreamError(404)
        err = RetryExhaustedError("get_user", 3, last)
        assert err.last_error is last
        assert str(err) == "get_user failed after 3 attempts: upstream returned 404"


class TestRequestIdFilter:

    def _record(self, **extra):
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_outside_request(self):
        record = self._record()
        RequestIdFilter().filter(record)
        assert record.request_id == "-"

    def test_uses_context_value(self):
        token = request_id_var.set("abc-123")
        try:
            record = self._record()
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "abc-123"

    def test_explicit_extra_wins(self):
        record = self._record(request_id="from-extra")
        RequestIdFilter().filter(record)
        assert record.request_id == "from-extra"
