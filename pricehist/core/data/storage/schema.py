"""数据库表结构和初始化."""

from duckdb import DuckDBPyConnection

TABLES: dict[str, str] = {
    # 待获取请求队列
    "pending_requests": """
        CREATE TABLE IF NOT EXISTS pending_requests (
            dataset VARCHAR NOT NULL,
            ticker_symbol VARCHAR NOT NULL,
            inclusive_start DATE NOT NULL,
            exclusive_end DATE NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (dataset, ticker_symbol, inclusive_start, exclusive_end)
        )
    """,
    # 已完整获取的月份
    "retrieved_months": """
        CREATE TABLE IF NOT EXISTS retrieved_months (
            ticker_symbol VARCHAR NOT NULL,
            year INTEGER NOT NULL,
            month INTEGER NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (ticker_symbol, year, month)
        )
    """,
    # 交易日价格
    "trading_day_prices": """
        CREATE TABLE IF NOT EXISTS trading_day_prices (
            ticker_symbol VARCHAR NOT NULL,
            trading_date DATE NOT NULL,
            open DECIMAL(18, 2) NOT NULL,
            high DECIMAL(18, 2) NOT NULL,
            low DECIMAL(18, 2) NOT NULL,
            close DECIMAL(18, 2) NOT NULL,
            PRIMARY KEY (ticker_symbol, trading_date)
        )
    """,
}


def ensure_schema(conn: DuckDBPyConnection) -> None:
    """创建缺失的数据表."""
    for ddl in TABLES.values():
        conn.execute(ddl)


__all__ = ["TABLES", "ensure_schema"]
