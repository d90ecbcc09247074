"""待获取请求仓储."""

from collections.abc import Sequence

from duckdb import DuckDBPyConnection

from pricehist.core.data.storage import storage_errors
from pricehist.core.models import RetrievalRequest

TABLE = "pending_requests"


class DuckDBPendingRequestStore:
    """基于DuckDB的待获取请求队列."""

    def __init__(self, conn: DuckDBPyConnection):
        self.conn = conn

    async def create(self, requests: Sequence[RetrievalRequest]) -> None:
        """登记请求, 重复登记被忽略."""
        if not requests:
            return
        rows = [
            (request.dataset, request.ticker_symbol, request.inclusive_start, request.exclusive_end)
            for request in requests
        ]
        with storage_errors(TABLE):
            self.conn.executemany(
                f"INSERT OR IGNORE INTO {TABLE} (dataset, ticker_symbol, inclusive_start, exclusive_end) "
                "VALUES (?, ?, ?, ?)",
                rows,
            )

    async def delete(self, request: RetrievalRequest) -> None:
        with storage_errors(TABLE):
            self.conn.execute(
                f"DELETE FROM {TABLE} WHERE dataset = ? AND ticker_symbol = ? "
                "AND inclusive_start = ? AND exclusive_end = ?",
                [request.dataset, request.ticker_symbol, request.inclusive_start, request.exclusive_end],
            )

    async def requests(self, ticker_symbol: str) -> list[RetrievalRequest]:
        with storage_errors(TABLE):
            rows = self.conn.execute(
                f"SELECT dataset, ticker_symbol, inclusive_start, exclusive_end FROM {TABLE} "
                "WHERE ticker_symbol = ? ORDER BY dataset, inclusive_start, exclusive_end",
                [ticker_symbol],
            ).fetchall()
        return [
            RetrievalRequest(dataset=dataset, ticker_symbol=ticker, inclusive_start=start, exclusive_end=end)
            for dataset, ticker, start, end in rows
        ]


__all__ = ["DuckDBPendingRequestStore"]
