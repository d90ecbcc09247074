"""重试机制实现，线性退避重试."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from pricehist.core.exceptions import ProviderError
from pricehist.core.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class RetryState(Enum):
    """重试状态."""

    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class RetryConfig:
    """重试配置."""

    max_attempts: int = 3  # 总尝试次数
    backoff_ms: int = 500  # 第n次失败后等待 n * backoff_ms 毫秒
    retry_on_exceptions: list[type[BaseException]] = field(default_factory=lambda: [ProviderError])

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_ms < 0:
            raise ValueError("backoff_ms must not be negative")


class LinearBackoffRetry:
    """线性退避重试实现.

    Only exceptions listed in ``retry_on_exceptions`` are retried; anything
    else, and cancellation, propagates immediately.
    """

    def __init__(self, config: RetryConfig):
        self.config = config
        self.attempt_count = 0
        self.total_delay = 0.0
        self.state = RetryState.READY
        self.last_exception: Exception | None = None

    async def execute(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """执行函数，应用重试逻辑.

        Args:
            func: 要执行的函数
            *args: 函数参数
            **kwargs: 函数关键字参数

        Returns:
            函数返回结果

        Raises:
            Exception: 当所有重试都失败时抛出最后的异常
        """
        self.state = RetryState.RUNNING
        self.attempt_count = 0
        self.total_delay = 0.0

        while True:
            self.attempt_count += 1
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                self.last_exception = e

                should_retry = any(isinstance(e, exc_type) for exc_type in self.config.retry_on_exceptions)
                if not should_retry or self.attempt_count >= self.config.max_attempts:
                    self.state = RetryState.FAILED
                    raise

                delay = self.calculate_delay(self.attempt_count)
                logger.warning(
                    f"Attempt {self.attempt_count} of {self.config.max_attempts} failed, retrying in {delay:.3f}s",
                    error_code=getattr(e, "error_code", None),
                    error=str(e),
                )
                # CancelledError raised here propagates to the caller
                await asyncio.sleep(delay)
                self.total_delay += delay
            else:
                self.state = RetryState.COMPLETED
                return result

    def calculate_delay(self, attempt_number: int) -> float:
        """计算第 ``attempt_number`` 次失败后的等待秒数."""
        if attempt_number < 1:
            return 0.0
        return attempt_number * self.config.backoff_ms / 1000.0

    def get_stats(self) -> dict[str, Any]:
        """获取重试统计信息."""
        return {
            "attempts": self.attempt_count,
            "max_attempts": self.config.max_attempts,
            "total_delay": self.total_delay,
            "state": self.state.value,
            "last_exception": str(self.last_exception) if self.last_exception else None,
        }


__all__ = ["LinearBackoffRetry", "RetryConfig", "RetryState"]
