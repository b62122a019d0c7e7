"""Unit tests for retry and graceful-degradation helpers."""

from unittest.mock import AsyncMock

import pytest

from recipe_planner.utils.resilience import backoff_delay, safe_execute_async, safe_execute_sync, with_retry


class TransientError(Exception):
    pass


class FatalError(Exception):
    pass


def is_transient(exc: Exception) -> bool:
    return isinstance(exc, TransientError)


class TestBackoffDelay:
    def test_exponential_doubles_per_attempt(self):
        assert [backoff_delay(n, 2) for n in (1, 2, 3)] == [2, 4, 8]

    def test_flat_delay(self):
        assert [backoff_delay(n, 2, exponential=False) for n in (1, 2, 3)] == [2, 2, 2]


class TestWithRetry:
    @pytest.mark.asyncio
    async def test_returns_first_success_without_sleeping(self, no_sleep):
        operation = AsyncMock(return_value="ok")

        assert await with_retry(operation, 3, is_transient) == "ok"
        assert operation.await_count == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retries_transient_errors_then_succeeds(self, no_sleep):
        operation = AsyncMock(side_effect=[TransientError("busy"), TransientError("busy"), "ok"])

        assert await with_retry(operation, 3, is_transient, base_delay=2) == "ok"
        assert operation.await_count == 3
        assert [call.args[0] for call in no_sleep.await_args_list] == [2, 4]

    @pytest.mark.asyncio
    async def test_reraises_last_transient_error_when_exhausted(self, no_sleep):
        operation = AsyncMock(side_effect=TransientError("still busy"))

        with pytest.raises(TransientError, match="still busy"):
            await with_retry(operation, 3, is_transient)
        assert operation.await_count == 3
        assert no_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_fatal_error_not_retried(self, no_sleep):
        operation = AsyncMock(side_effect=FatalError("bad request"))

        with pytest.raises(FatalError):
            await with_retry(operation, 3, is_transient)
        assert operation.await_count == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejects_non_positive_attempts(self):
        with pytest.raises(ValueError, match="max_attempts"):
            await with_retry(AsyncMock(), 0, is_transient)


class TestSafeExecute:
    @pytest.mark.asyncio
    async def test_async_returns_default_on_failure(self):
        async def _boom():
            raise RuntimeError("boom")

        assert await safe_execute_async(_boom(), "Boom", default_return="fallback") == "fallback"

    @pytest.mark.asyncio
    async def test_async_reraise(self):
        async def _boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await safe_execute_async(_boom(), "Boom", reraise=True)

    def test_sync_returns_result(self):
        assert safe_execute_sync(lambda: 42, "Answer") == 42

    def test_sync_returns_default_on_failure(self):
        assert safe_execute_sync(lambda: 1 / 0, "Divide", log_level="debug", default_return=0) == 0
