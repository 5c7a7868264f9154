"""
Unit tests for core/retry.py.

Operations are plain coroutines scripted to fail a given number of times;
delays are captured by RecordingSleep instead of actually sleeping.
"""

import asyncio

import pytest

from core.errors import (
    DeserializationError,
    RetryExhaustedError,
    UpstreamError,
    ValidationError,
)
from core.retry import RetryPolicy, call_with_retry
from tests.fakes import RecordingSleep


class FlakyOperation:
    """Raises the given errors in order, then returns "ok"."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


def run(operation, fn, policy=None, sleep=None):
    return asyncio.run(call_with_retry(operation, fn, policy or RetryPolicy(), sleep))


class TestCoveredOperations:

    def test_success_first_try_does_not_sleep(self):
        sleep = RecordingSleep()
        op = FlakyOperation()
        assert run("get_user", op, sleep=sleep) == "ok"
        assert op.calls == 1
        assert sleep.delays == []

    def test_two_failures_then_success_uses_linear_backoff(self):
        sleep = RecordingSleep()
        op = FlakyOperation(UpstreamError(503), UpstreamError(502))
        assert run("get_user", op, sleep=sleep) == "ok"
        assert op.calls == 3
        assert sleep.delays == [1.0, 2.0]

    def test_three_failures_exhaust_budget(self):
        sleep = RecordingSleep()
        op = FlakyOperation(UpstreamError(404), UpstreamError(404), UpstreamError(404), UpstreamError(404))
        with pytest.raises(RetryExhaustedError) as info:
            run("delete_user", op, sleep=sleep)

        assert op.calls == 3
        assert sleep.delays == [1.0, 2.0]
        err = info.value
        assert err.operation == "delete_user"
        assert err.attempts == 3
        assert isinstance(err.last_error, UpstreamError)
        assert err.__cause__ is err.last_error

    def test_deserialization_errors_are_retried(self):
        sleep = RecordingSleep()
        op = FlakyOperation(DeserializationError("empty body"))
        assert run("get_user", op, sleep=sleep) == "ok"
        assert sleep.delays == [1.0]

    def test_validation_errors_are_not_retried(self):
        sleep = RecordingSleep()
        op = FlakyOperation(ValidationError(["name: Field required"]))
        with pytest.raises(ValidationError):
            run("get_user", op, sleep=sleep)
        assert op.calls == 1
        assert sleep.delays == []

    def test_base_delay_scales_backoff(self):
        sleep = RecordingSleep()
        policy = RetryPolicy(max_attempts=4, base_delay_seconds=0.5)
        op = FlakyOperation(UpstreamError(500), UpstreamError(500), UpstreamError(500))
        assert run("get_user", op, policy, sleep) == "ok"
        assert sleep.delays == [0.5, 1.0, 1.5]


class TestUncoveredOperations:

    @pytest.mark.parametrize("operation", ["list_users", "create_user", "update_user", "create_user_todo"])
    def test_fail_on_first_error(self, operation):
        sleep = RecordingSleep()
        op = FlakyOperation(UpstreamError(500))
        with pytest.raises(UpstreamError):
            run(operation, op, sleep=sleep)
        assert op.calls == 1
        assert sleep.delays == []

    def test_coverage_is_configurable(self):
        sleep = RecordingSleep()
        policy = RetryPolicy().with_operations({"list_users"})
        op = FlakyOperation(UpstreamError(500))
        assert run("list_users", op, policy, sleep) == "ok"
        assert op.calls == 2

        op = FlakyOperation(UpstreamError(500))
        with pytest.raises(UpstreamError):
            run("get_user", op, policy, sleep)

    def test_single_attempt_policy_never_retries(self):
        sleep = RecordingSleep()
        op = FlakyOperation(UpstreamError(500))
        with pytest.raises(UpstreamError):
            run("get_user", op, RetryPolicy(max_attempts=1), sleep)
        assert op.calls == 1


class TestPolicyFromSettings:

    def test_reads_settings(self):
        class _Settings:
            retry_max_attempts = 5
            retry_base_delay_seconds = 0.25
            retry_operations = ["get_user"]

        policy = RetryPolicy.from_settings(_Settings())
        assert policy.max_attempts == 5
        assert policy.base_delay_seconds == 0.25
        assert policy.applies_to("get_user")
        assert not policy.applies_to("delete_user")

    def test_default_covers_get_and_delete_only(self):
        policy = RetryPolicy()
        assert policy.operations == {"get_user", "delete_user"}
