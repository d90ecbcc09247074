"""Records calendar months whose trading data is now fully stored."""

from collections.abc import Sequence
from datetime import date, timedelta

from pricehist.core.data.repositories.base import RetrievedMonthStore
from pricehist.core.logging import get_logger
from pricehist.core.models.calendar import YearMonth
from pricehist.core.models.requests import RetrievalRequest, RetrievedMonth
from pricehist.core.services.calendars import TradingMonthCalendar, default_calendar

logger = get_logger(__name__)


class RetrievedMonthRecorder:
    """根据已完成请求记录完整获取的月份.

    A request boundary on the 1st (or the first Monday) marks a month as
    begun; a boundary on the last day (or a closing Friday) marks it as
    complete. A month split across two fulfilled requests of the same ticker
    is complete when the follow-on request reaches the month's end.
    """

    def __init__(self, retrieved_months: RetrievedMonthStore, calendar: TradingMonthCalendar = default_calendar) -> None:
        self.retrieved_months = retrieved_months
        self.calendar = calendar

    async def recorded(self, fulfilled: Sequence[RetrievalRequest] | None) -> list[RetrievedMonth]:
        """Write every month covered by ``fulfilled`` and return what was written."""
        if not fulfilled:
            return []

        by_ticker: dict[str, list[RetrievalRequest]] = {}
        for request in fulfilled:
            by_ticker.setdefault(request.ticker_symbol, []).append(request)

        months: list[RetrievedMonth] = []
        for request in fulfilled:
            months.extend(self._covered(request, by_ticker[request.ticker_symbol]))

        unique = list(dict.fromkeys(months))
        if not unique:
            logger.debug("No complete months in fulfilled requests", fulfilled=len(fulfilled))
            return []

        await self.retrieved_months.create(unique)
        logger.info("Recorded retrieved months", months=len(unique))
        return unique

    def _covered(self, request: RetrievalRequest, same_ticker: list[RetrievalRequest]) -> list[RetrievedMonth]:
        ticker_symbol = request.ticker_symbol
        start_month = YearMonth.of(request.inclusive_start)
        end_month = YearMonth.of(request.exclusive_end)
        begun = self.calendar.has_begun(request.inclusive_start)

        if start_month == end_month:
            if begun and self._is_end_complete(request.exclusive_end, same_ticker, set()):
                return [RetrievedMonth(ticker_symbol, start_month)]
            return []

        months: list[RetrievedMonth] = []
        if begun:
            months.append(RetrievedMonth(ticker_symbol, start_month))

        between = start_month.plus_months(1)
        while between < end_month:
            months.append(RetrievedMonth(ticker_symbol, between))
            between = between.plus_months(1)

        if self._is_end_complete(request.exclusive_end, same_ticker, set()):
            months.append(RetrievedMonth(ticker_symbol, end_month))
        return months

    def _is_end_complete(self, end: date, same_ticker: list[RetrievalRequest], visited: set[date]) -> bool:
        if self.calendar.is_complete(end):
            return True

        visited.add(end)
        month = YearMonth.of(end)
        for follower in same_ticker:
            if follower.inclusive_start not in (end, end + timedelta(days=1)):
                continue
            follower_end = follower.exclusive_end
            if YearMonth.of(follower_end) > month:
                return True
            if follower_end not in visited and self._is_end_complete(follower_end, same_ticker, visited):
                return True
        return False


__all__ = ["RetrievedMonthRecorder"]
