"""Splits a date range into calendar-month aligned retrieval requests."""

from datetime import date

from pricehist.core.logging import get_logger
from pricehist.core.models.calendar import first_of_next_month
from pricehist.core.models.requests import RetrievalRequest

logger = get_logger(__name__)


class RequestSlicer:
    """按自然月切分获取请求."""

    def slice(self, dataset: str, ticker_symbol: str, inclusive_start: date, exclusive_end: date) -> list[RetrievalRequest]:
        """Split ``[inclusive_start, exclusive_end)`` at every month boundary.

        A range that fits inside one calendar month is returned unchanged.
        Otherwise the result holds an optional leading partial month, every
        whole month in between, and an optional trailing partial month, in
        chronological order.

        Raises:
            ValueError: when ``inclusive_start`` is not before ``exclusive_end``.
        """
        if inclusive_start >= exclusive_end:
            raise ValueError(f"inclusive_start {inclusive_start} must be before exclusive_end {exclusive_end}")

        if exclusive_end <= first_of_next_month(inclusive_start):
            return [self._request(dataset, ticker_symbol, inclusive_start, exclusive_end)]

        slices: list[RetrievalRequest] = []
        cursor = inclusive_start

        if cursor.day != 1:
            month_start = first_of_next_month(cursor)
            slices.append(self._request(dataset, ticker_symbol, cursor, month_start))
            cursor = month_start

        while first_of_next_month(cursor) <= exclusive_end:
            month_end = first_of_next_month(cursor)
            slices.append(self._request(dataset, ticker_symbol, cursor, month_end))
            cursor = month_end

        if cursor < exclusive_end:
            slices.append(self._request(dataset, ticker_symbol, cursor, exclusive_end))

        logger.debug("Sliced retrieval range", ticker=ticker_symbol, dataset=dataset, slices=len(slices))
        return slices

    @staticmethod
    def _request(dataset: str, ticker_symbol: str, inclusive_start: date, exclusive_end: date) -> RetrievalRequest:
        return RetrievalRequest(
            dataset=dataset,
            ticker_symbol=ticker_symbol,
            inclusive_start=inclusive_start,
            exclusive_end=exclusive_end,
        )


__all__ = ["RequestSlicer"]
