"""仓储接口定义."""

from collections.abc import Sequence
from datetime import date
from typing import Protocol, runtime_checkable

from pricehist.core.models import RetrievalRequest, RetrievedMonth, TradingDayPrices


@runtime_checkable
class PendingRequestStore(Protocol):
    """待获取请求队列."""

    async def create(self, requests: Sequence[RetrievalRequest]) -> None:
        """登记请求，已存在的请求被忽略."""
        ...

    async def delete(self, request: RetrievalRequest) -> None:
        """删除已完成的请求."""
        ...

    async def requests(self, ticker_symbol: str) -> list[RetrievalRequest]:
        """返回某个代码尚未完成的请求."""
        ...


@runtime_checkable
class RetrievedMonthStore(Protocol):
    """已完整获取月份的记录."""

    async def get(self, ticker_symbol: str, from_year: int, to_year: int) -> set[RetrievedMonth]:
        """返回 ``from_year`` 至 ``to_year`` (含) 之间已记录的月份."""
        ...

    async def create(self, months: Sequence[RetrievedMonth]) -> None:
        """追加记录，已存在的月份被忽略."""
        ...


@runtime_checkable
class TradingDayPricesStore(Protocol):
    """交易日价格存储."""

    async def create(self, prices: Sequence[TradingDayPrices]) -> None:
        ...

    async def prices(self, ticker_symbol: str, inclusive_start: date, exclusive_end: date) -> list[TradingDayPrices]:
        ...

    async def count(self, ticker_symbol: str, inclusive_start: date, exclusive_end: date) -> int:
        ...


__all__ = ["PendingRequestStore", "RetrievedMonthStore", "TradingDayPricesStore"]
