"""测试线性退避重试."""

import asyncio

import pytest

from pricehist.core.exceptions import NetworkError, ProviderError, ResponseParseError
from pricehist.core.patterns import LinearBackoffRetry, RetryConfig, RetryState


class TestRetryConfig:
    """测试重试配置."""

    def test_default_config(self):
        config = RetryConfig()

        assert config.max_attempts == 3
        assert config.backoff_ms == 500
        assert config.retry_on_exceptions == [ProviderError]

    @pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"backoff_ms": -1}])
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            RetryConfig(**kwargs)


class TestLinearBackoffRetry:
    """测试线性退避重试."""

    @pytest.fixture
    def retry_instance(self):
        return LinearBackoffRetry(RetryConfig(max_attempts=3, backoff_ms=1))

    def test_delay_grows_linearly(self):
        retry = LinearBackoffRetry(RetryConfig(backoff_ms=500))

        assert retry.calculate_delay(0) == 0.0
        assert retry.calculate_delay(1) == 0.5
        assert retry.calculate_delay(2) == 1.0
        assert retry.calculate_delay(3) == 1.5

    @pytest.mark.asyncio
    async def test_successful_execution(self, retry_instance):
        async def success_func(value, suffix=""):
            return value + suffix

        result = await retry_instance.execute(success_func, "ok", suffix="!")

        assert result == "ok!"
        assert retry_instance.state == RetryState.COMPLETED
        assert retry_instance.attempt_count == 1
        assert retry_instance.total_delay == 0.0

    @pytest.mark.asyncio
    async def test_retry_until_success(self, retry_instance):
        call_count = 0

        async def flaky_func():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise NetworkError(f"尝试 {call_count}", "test_provider")
            return "success"

        assert await retry_instance.execute(flaky_func) == "success"
        assert call_count == 3
        assert retry_instance.total_delay == pytest.approx(0.003)

    @pytest.mark.asyncio
    async def test_max_attempts_counts_every_call(self, retry_instance):
        call_count = 0

        async def always_fail_func():
            nonlocal call_count
            call_count += 1
            raise ProviderError(f"失败 {call_count}", "test_provider")

        with pytest.raises(ProviderError, match="失败 3"):
            await retry_instance.execute(always_fail_func)

        assert call_count == 3
        assert retry_instance.state == RetryState.FAILED
        stats = retry_instance.get_stats()
        assert stats["attempts"] == 3
        assert stats["state"] == "failed"
        assert stats["last_exception"] == "失败 3"

    @pytest.mark.asyncio
    async def test_non_retryable_error_raised_at_once(self, retry_instance):
        call_count = 0

        async def broken_func():
            nonlocal call_count
            call_count += 1
            raise ResponseParseError("unexpected payload", "test_provider")

        with pytest.raises(ResponseParseError):
            await retry_instance.execute(broken_func)

        assert call_count == 1

    @pytest.mark.asyncio
    async def test_cancellation_during_backoff(self):
        retry = LinearBackoffRetry(RetryConfig(max_attempts=5, backoff_ms=60_000))

        async def always_fail_func():
            raise ProviderError("失败", "test_provider")

        task = asyncio.create_task(retry.execute(always_fail_func))
        while retry.attempt_count == 0:
            await asyncio.sleep(0)
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert retry.attempt_count == 1
