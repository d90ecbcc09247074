"""Bounded worker pool draining pending retrieval requests."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from pricehist.core.config import RetrievalConfig
from pricehist.core.data.providers.base import EquityProvider
from pricehist.core.data.repositories.base import PendingRequestStore, TradingDayPricesStore
from pricehist.core.exceptions import (
    ExhaustedRetriesError,
    PendingRequestsRemainError,
    ProviderError,
    RetrievalError,
    RetrievalTimeoutError,
)
from pricehist.core.logging import get_logger
from pricehist.core.models import RetrievalRequest
from pricehist.core.patterns.retry import LinearBackoffRetry, RetryConfig
from pricehist.core.patterns.throttle import Throttle, ThrottleCleaner

logger = get_logger(__name__)


class ConcurrentExecutor:
    """并发执行获取请求，失败即停止.

    ``max_concurrent_connections`` workers pull requests from a shared queue.
    Each request is fetched through the throttle, its prices stored and its
    pending entry deleted. The first request that fails for good sets the
    shared cancellation event, so no further request is started, and the
    remaining workers are cancelled.
    """

    def __init__(
        self,
        provider: EquityProvider,
        pending_requests: PendingRequestStore,
        prices: TradingDayPricesStore,
        config: RetrievalConfig,
    ) -> None:
        self.provider = provider
        self.pending_requests = pending_requests
        self.prices = prices
        self.config = config
        self.retry_config = RetryConfig(max_attempts=config.max_retries, backoff_ms=config.retry_backoff_ms)

    async def run(self, requests: Sequence[RetrievalRequest]) -> list[RetrievalRequest]:
        """Fetch every request, returning those fulfilled.

        Raises:
            ExhaustedRetriesError: a request kept failing with provider errors.
            RetrievalTimeoutError: the pool did not drain in time.
            PendingRequestsRemainError: pending requests survived a clean run.
            RetrievalError: the provider reported a non-recoverable failure,
                or any other error (storage, unexpected) stopped a worker; the
                original error is chained as ``__cause__``.

        Any raised :class:`RetrievalError` carries the requests fulfilled
        before the failure in ``fulfilled``.
        """
        if not requests:
            return []

        throttle = Throttle(self.config.max_connections_per_second, window=self.config.throttle_window)
        cancelled = asyncio.Event()
        queue: asyncio.Queue[RetrievalRequest] = asyncio.Queue()
        for request in requests:
            queue.put_nowait(request)

        fulfilled: list[RetrievalRequest] = []
        timeout = len(requests) * self.config.max_seconds_per_request
        worker_count = min(self.config.max_concurrent_connections, len(requests))

        logger.info(f"Draining {len(requests)} requests with {worker_count} workers", timeout_seconds=timeout)

        async with ThrottleCleaner(throttle, self.config.throttle_clean_interval):
            workers = [
                asyncio.create_task(self._worker(queue, throttle, cancelled, fulfilled), name=f"retrieval-worker-{index}")
                for index in range(worker_count)
            ]
            try:
                _, not_done = await asyncio.wait(workers, timeout=timeout, return_when=asyncio.FIRST_EXCEPTION)
            finally:
                unfinished = [worker for worker in workers if not worker.done()]
                if unfinished:
                    cancelled.set()
                    for worker in unfinished:
                        worker.cancel()
                    await asyncio.wait(unfinished)

        failure = next(
            (worker.exception() for worker in workers if not worker.cancelled() and worker.exception() is not None),
            None,
        )
        if failure is not None:
            logger.error(f"Retrieval failed fast after {len(fulfilled)} fulfilled requests", error=str(failure))
            if isinstance(failure, RetrievalError):
                failure.fulfilled = list(fulfilled)
                raise failure
            error = RetrievalError(
                f"Retrieval aborted by {type(failure).__name__}: {failure}",
                details={"cause": type(failure).__name__},
            )
            error.fulfilled = list(fulfilled)
            raise error from failure

        if not_done:
            error = RetrievalTimeoutError(
                f"Retrieval of {len(requests)} requests did not finish within {timeout:.1f}s",
                timeout_seconds=timeout,
            )
            error.fulfilled = list(fulfilled)
            logger.error(error.message, error_code=error.error_code)
            raise error

        await self._verify_drained(requests, fulfilled)
        logger.info(f"Fulfilled {len(fulfilled)} requests")
        return fulfilled

    async def _worker(
        self,
        queue: asyncio.Queue[RetrievalRequest],
        throttle: Throttle,
        cancelled: asyncio.Event,
        fulfilled: list[RetrievalRequest],
    ) -> None:
        while not cancelled.is_set():
            try:
                request = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            try:
                await self._retrieve(request, throttle)
            except Exception:
                cancelled.set()
                raise
            fulfilled.append(request)

    async def _retrieve(self, request: RetrievalRequest, throttle: Throttle) -> None:
        retry = LinearBackoffRetry(self.retry_config)
        try:
            await retry.execute(self._attempt, request, throttle)
        except ProviderError as e:
            raise ExhaustedRetriesError(
                f"Retrieval of {request} failed after {retry.attempt_count} attempts: {e.message}",
                request=request,
                attempts=retry.attempt_count,
            ) from e

    async def _attempt(self, request: RetrievalRequest, throttle: Throttle) -> None:
        logger.info(
            f"Retrieving {request}",
            ticker=request.ticker_symbol,
            dataset=request.dataset,
            provider=self.provider.name,
        )
        prices = await self.provider.fetch(
            request.dataset,
            request.ticker_symbol,
            request.inclusive_start,
            request.exclusive_end,
            throttle,
        )
        await self.prices.create(prices)
        await self.pending_requests.delete(request)

    async def _verify_drained(self, requests: Sequence[RetrievalRequest], fulfilled: list[RetrievalRequest]) -> None:
        remaining: list[RetrievalRequest] = []
        for ticker_symbol in sorted({request.ticker_symbol for request in requests}):
            remaining.extend(await self.pending_requests.requests(ticker_symbol))

        if remaining:
            error = PendingRequestsRemainError(
                f"{len(remaining)} pending requests remain after retrieval completed",
                remaining=remaining,
            )
            error.fulfilled = list(fulfilled)
            logger.error(error.message, error_code=error.error_code)
            raise error


__all__ = ["ConcurrentExecutor"]
