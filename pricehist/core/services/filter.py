"""Drops retrieval requests whose month is already stored locally."""

from collections.abc import Sequence

from pricehist.core.data.repositories.base import RetrievedMonthStore
from pricehist.core.logging import get_logger
from pricehist.core.models.calendar import YearMonth, is_whole_month
from pricehist.core.models.requests import RetrievalRequest, RetrievedMonth

logger = get_logger(__name__)


class UnnecessaryRequestFilter:
    """过滤已缓存整月的请求.

    Only requests spanning exactly one calendar month can be recognised as
    redundant; partial months are always kept because the month-level record
    cannot prove them complete.
    """

    def __init__(self, retrieved_months: RetrievedMonthStore) -> None:
        self.retrieved_months = retrieved_months

    async def filter(self, requests: Sequence[RetrievalRequest] | None) -> list[RetrievalRequest]:
        if not requests:
            return []

        by_ticker: dict[str, list[RetrievalRequest]] = {}
        for request in requests:
            by_ticker.setdefault(request.ticker_symbol, []).append(request)

        cached: set[RetrievedMonth] = set()
        for ticker_symbol, ticker_requests in by_ticker.items():
            from_year = min(request.inclusive_start.year for request in ticker_requests)
            to_year = max(request.exclusive_end.year for request in ticker_requests)
            cached |= await self.retrieved_months.get(ticker_symbol, from_year, to_year)

        required = [request for request in requests if not self._is_cached(request, cached)]

        logger.debug("Filtered cached months", received=len(requests), required=len(required))
        return required

    @staticmethod
    def _is_cached(request: RetrievalRequest, cached: set[RetrievedMonth]) -> bool:
        if not is_whole_month(request.inclusive_start, request.exclusive_end):
            return False
        return RetrievedMonth(request.ticker_symbol, YearMonth.of(request.inclusive_start)) in cached


__all__ = ["UnnecessaryRequestFilter"]
