"""Recombines adjacent retrieval requests into fewer, larger ones."""

from collections.abc import Sequence

from pricehist.core.logging import get_logger
from pricehist.core.models.calendar import plus_months
from pricehist.core.models.requests import RetrievalRequest

logger = get_logger(__name__)


class RequestMerger:
    """合并相邻请求，单个请求跨度不超过 ``max_months`` 个月."""

    def merge(
        self, requests: Sequence[RetrievalRequest] | None, max_months: int | None = None
    ) -> list[RetrievalRequest] | None:
        """Merge contiguous requests of the same dataset and ticker.

        Requests are ordered by dataset, ticker and start date, then scanned
        once. A request joins the running accumulator when it starts exactly
        where the accumulator ends and the extended span stays within
        ``max_months`` of the accumulator's start. Gaps always flush;
        ``max_months=None`` merges on adjacency alone.

        Returns:
            ``None`` for ``None`` input, otherwise the merged requests.
        """
        if max_months is not None and max_months < 1:
            raise ValueError(f"max_months must be at least 1, got {max_months}")
        if requests is None:
            return None
        if not requests:
            return []

        ordered = sorted(requests, key=lambda r: (r.dataset, r.ticker_symbol, r.inclusive_start))

        merged: list[RetrievalRequest] = []
        accumulator = ordered[0]
        for request in ordered[1:]:
            if self._extends(accumulator, request, max_months):
                accumulator = accumulator.with_exclusive_end(request.exclusive_end)
            else:
                merged.append(accumulator)
                accumulator = request
        merged.append(accumulator)

        logger.debug("Merged retrieval requests", received=len(requests), merged=len(merged))
        return merged

    @staticmethod
    def _extends(accumulator: RetrievalRequest, request: RetrievalRequest, max_months: int | None) -> bool:
        if request.dataset != accumulator.dataset or request.ticker_symbol != accumulator.ticker_symbol:
            return False
        if request.inclusive_start != accumulator.exclusive_end:
            return False
        if max_months is None:
            return True
        return request.exclusive_end <= plus_months(accumulator.inclusive_start, max_months)


__all__ = ["RequestMerger"]
