"""pricehist - 历史股票价格回填工具

将日期区间按自然月切分, 跳过已完整获取的月份, 通过限流并发的方式
向数据提供商获取日线价格并记录已完成的月份.
"""

from datetime import date

from pricehist.core.config import ConfigManager, PriceHistConfig
from pricehist.core.exceptions import PriceHistError, RetrievalError
from pricehist.core.models import RetrievalRequest, RetrievedMonth, TradingDayPrices, YearMonth
from pricehist.core.services import HistoryRetrievalService

__version__ = "0.1.0"

# 全局服务实例
_service: HistoryRetrievalService | None = None


def get_service() -> HistoryRetrievalService:
    """获取全局服务实例, 首次调用时按默认配置创建"""
    global _service
    if _service is None:
        _service = HistoryRetrievalService.from_config(ConfigManager().get_config())
    return _service


def get(dataset: str, ticker_symbol: str, inclusive_start: date, exclusive_end: date) -> list[RetrievalRequest]:
    """同步获取历史价格

    Examples:
        >>> import pricehist
        >>> from datetime import date
        >>> pricehist.get("WIKI", "AAPL", date(2015, 1, 1), date(2015, 4, 1))
    """
    return get_service().get(dataset, ticker_symbol, inclusive_start, exclusive_end)


async def get_async(
    dataset: str, ticker_symbol: str, inclusive_start: date, exclusive_end: date
) -> list[RetrievalRequest]:
    """异步获取历史价格"""
    return await get_service().get_async(dataset, ticker_symbol, inclusive_start, exclusive_end)


__all__ = [
    "HistoryRetrievalService",
    "PriceHistConfig",
    "PriceHistError",
    "RetrievalError",
    "RetrievalRequest",
    "RetrievedMonth",
    "TradingDayPrices",
    "YearMonth",
    "__version__",
    "get",
    "get_async",
    "get_service",
]
