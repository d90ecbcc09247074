"""Concurrency patterns used by the retrieval pipeline."""

from pricehist.core.patterns.retry import LinearBackoffRetry, RetryConfig, RetryState
from pricehist.core.patterns.throttle import Throttle, ThrottleCleaner

__all__ = ["LinearBackoffRetry", "RetryConfig", "RetryState", "Throttle", "ThrottleCleaner"]
