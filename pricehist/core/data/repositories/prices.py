"""交易日价格仓储."""

from collections.abc import Sequence
from datetime import date

from duckdb import DuckDBPyConnection

from pricehist.core.data.storage import storage_errors
from pricehist.core.models import TradingDayPrices

TABLE = "trading_day_prices"


class DuckDBTradingDayPricesStore:
    """基于DuckDB的交易日价格存储, 同一交易日重复写入时覆盖."""

    def __init__(self, conn: DuckDBPyConnection):
        self.conn = conn

    async def create(self, prices: Sequence[TradingDayPrices]) -> None:
        if not prices:
            return
        rows = [
            (p.ticker_symbol, p.trading_date, p.open_price, p.high_price, p.low_price, p.close_price)
            for p in prices
        ]
        with storage_errors(TABLE):
            self.conn.executemany(
                f"INSERT OR REPLACE INTO {TABLE} (ticker_symbol, trading_date, open, high, low, close) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                rows,
            )

    async def prices(self, ticker_symbol: str, inclusive_start: date, exclusive_end: date) -> list[TradingDayPrices]:
        with storage_errors(TABLE):
            rows = self.conn.execute(
                f"SELECT trading_date, open, high, low, close FROM {TABLE} "
                "WHERE ticker_symbol = ? AND trading_date >= ? AND trading_date < ? ORDER BY trading_date",
                [ticker_symbol, inclusive_start, exclusive_end],
            ).fetchall()
        return [
            TradingDayPrices(
                ticker_symbol=ticker_symbol,
                trading_date=trading_date,
                open_price=open_price,
                high_price=high_price,
                low_price=low_price,
                close_price=close_price,
            )
            for trading_date, open_price, high_price, low_price, close_price in rows
        ]

    async def count(self, ticker_symbol: str, inclusive_start: date, exclusive_end: date) -> int:
        with storage_errors(TABLE):
            row = self.conn.execute(
                f"SELECT COUNT(*) FROM {TABLE} WHERE ticker_symbol = ? AND trading_date >= ? AND trading_date < ?",
                [ticker_symbol, inclusive_start, exclusive_end],
            ).fetchone()
        return int(row[0]) if row else 0


__all__ = ["DuckDBTradingDayPricesStore"]
