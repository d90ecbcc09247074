"""数据仓储."""

from pricehist.core.data.repositories.base import PendingRequestStore, RetrievedMonthStore, TradingDayPricesStore
from pricehist.core.data.repositories.pending import DuckDBPendingRequestStore
from pricehist.core.data.repositories.prices import DuckDBTradingDayPricesStore
from pricehist.core.data.repositories.retrieved import DuckDBRetrievedMonthStore

__all__ = [
    "DuckDBPendingRequestStore",
    "DuckDBRetrievedMonthStore",
    "DuckDBTradingDayPricesStore",
    "PendingRequestStore",
    "RetrievedMonthStore",
    "TradingDayPricesStore",
]
