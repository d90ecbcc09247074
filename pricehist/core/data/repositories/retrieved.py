"""已获取月份仓储."""

from collections.abc import Sequence

from duckdb import DuckDBPyConnection

from pricehist.core.data.storage import storage_errors
from pricehist.core.models import RetrievedMonth, YearMonth

TABLE = "retrieved_months"


class DuckDBRetrievedMonthStore:
    """基于DuckDB的已获取月份记录, 只追加不删除."""

    def __init__(self, conn: DuckDBPyConnection):
        self.conn = conn

    async def get(self, ticker_symbol: str, from_year: int, to_year: int) -> set[RetrievedMonth]:
        with storage_errors(TABLE):
            rows = self.conn.execute(
                f"SELECT year, month FROM {TABLE} WHERE ticker_symbol = ? AND year BETWEEN ? AND ?",
                [ticker_symbol, from_year, to_year],
            ).fetchall()
        return {RetrievedMonth(ticker_symbol, YearMonth(year, month)) for year, month in rows}

    async def create(self, months: Sequence[RetrievedMonth]) -> None:
        if not months:
            return
        rows = [(month.ticker_symbol, month.year_month.year, month.year_month.month) for month in months]
        with storage_errors(TABLE):
            self.conn.executemany(
                f"INSERT OR IGNORE INTO {TABLE} (ticker_symbol, year, month) VALUES (?, ?, ?)",
                rows,
            )

    async def months(self, ticker_symbol: str) -> list[RetrievedMonth]:
        """按时间顺序返回某个代码的全部已获取月份."""
        with storage_errors(TABLE):
            rows = self.conn.execute(
                f"SELECT year, month FROM {TABLE} WHERE ticker_symbol = ? ORDER BY year, month",
                [ticker_symbol],
            ).fetchall()
        return [RetrievedMonth(ticker_symbol, YearMonth(year, month)) for year, month in rows]


__all__ = ["DuckDBRetrievedMonthStore"]
