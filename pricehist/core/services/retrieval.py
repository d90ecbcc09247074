"""历史价格获取服务 - 提供同步和异步接口."""

from __future__ import annotations

import asyncio
from datetime import date

import httpx
from duckdb import DuckDBPyConnection

from pricehist.core.config import PriceHistConfig, RetrievalConfig
from pricehist.core.data.providers import EquityProvider, create_provider
from pricehist.core.data.repositories import (
    DuckDBPendingRequestStore,
    DuckDBRetrievedMonthStore,
    DuckDBTradingDayPricesStore,
    PendingRequestStore,
    RetrievedMonthStore,
    TradingDayPricesStore,
)
from pricehist.core.data.storage import DuckDBFactory, DuckDBFactoryConfig
from pricehist.core.exceptions import RetrievalError
from pricehist.core.logging import get_logger, log_context
from pricehist.core.models import RetrievalRequest
from pricehist.core.patterns.executor import ConcurrentExecutor
from pricehist.core.services.filter import UnnecessaryRequestFilter
from pricehist.core.services.merger import RequestMerger
from pricehist.core.services.recorder import RetrievedMonthRecorder
from pricehist.core.services.slicer import RequestSlicer

logger = get_logger(__name__)


class HistoryRetrievalService:
    """获取并缓存某个代码在日期区间内的日线价格.

    The range is sliced into calendar months, months already recorded are
    dropped, the rest merged and lodged as pending requests. Every pending
    request for the ticker is then drained through the executor and the
    months now fully stored are recorded, so a repeated call for the same
    whole-month range makes no provider calls.
    """

    def __init__(
        self,
        provider: EquityProvider,
        pending_requests: PendingRequestStore,
        retrieved_months: RetrievedMonthStore,
        prices: TradingDayPricesStore,
        config: RetrievalConfig | None = None,
        conn: DuckDBPyConnection | None = None,
    ) -> None:
        self.provider = provider
        self.pending_requests = pending_requests
        self.retrieved_months = retrieved_months
        self.prices = prices
        self.config = config or RetrievalConfig()
        self.conn = conn

        self.slicer = RequestSlicer()
        self.filter = UnnecessaryRequestFilter(retrieved_months)
        self.merger = RequestMerger()
        self.recorder = RetrievedMonthRecorder(retrieved_months)
        self.executor = ConcurrentExecutor(provider, pending_requests, prices, self.config)

    @classmethod
    def from_config(
        cls,
        config: PriceHistConfig,
        conn: DuckDBPyConnection | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> HistoryRetrievalService:
        """按配置创建服务, 未提供连接时打开配置中的DuckDB数据库."""
        if conn is None:
            factory = DuckDBFactory(
                DuckDBFactoryConfig(database=config.storage.db_path, pragmas={"threads": config.storage.threads})
            )
            conn = factory.create_connection()

        return cls(
            provider=create_provider(config.provider, client=client),
            pending_requests=DuckDBPendingRequestStore(conn),
            retrieved_months=DuckDBRetrievedMonthStore(conn),
            prices=DuckDBTradingDayPricesStore(conn),
            config=config.retrieval,
            conn=conn,
        )

    async def get_async(
        self,
        dataset: str,
        ticker_symbol: str,
        inclusive_start: date,
        exclusive_end: date,
    ) -> list[RetrievalRequest]:
        """异步获取 ``[inclusive_start, exclusive_end)`` 之间的价格.

        Returns:
            本次完成的请求

        Raises:
            RetrievalError: 批量获取无法全部完成
        """
        with log_context(ticker=ticker_symbol, dataset=dataset):
            slices = self.slicer.slice(dataset, ticker_symbol, inclusive_start, exclusive_end)
            required = await self.filter.filter(slices)
            merged = self.merger.merge(required, self.config.max_months_per_request) or []

            if merged:
                await self.pending_requests.create(merged)
                logger.info(f"Lodged {len(merged)} pending requests from {len(slices)} slices")

            outstanding = await self.pending_requests.requests(ticker_symbol)
            if not outstanding:
                logger.info("All requested months are already retrieved")
                return []

            try:
                fulfilled = await self.executor.run(outstanding)
            except RetrievalError as e:
                await self.recorder.recorded(e.fulfilled)
                raise

            await self.recorder.recorded(fulfilled)
            return fulfilled

    def get(
        self,
        dataset: str,
        ticker_symbol: str,
        inclusive_start: date,
        exclusive_end: date,
    ) -> list[RetrievalRequest]:
        """同步获取, 在新的事件循环中运行 :meth:`get_async`."""

        async def run() -> list[RetrievalRequest]:
            try:
                return await self.get_async(dataset, ticker_symbol, inclusive_start, exclusive_end)
            finally:
                # HTTP客户端绑定在当前事件循环上
                await self.provider.close()

        return asyncio.run(run())

    async def aclose(self) -> None:
        """关闭提供商和数据库连接."""
        await self.provider.close()
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def close(self) -> None:
        asyncio.run(self.aclose())


__all__ = ["HistoryRetrievalService"]
