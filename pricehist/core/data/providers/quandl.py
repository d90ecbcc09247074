"""Quandl dataset API 数据提供商实现."""

from datetime import date, timedelta
from typing import Any

from pricehist.core.data.providers.base import EquityProvider
from pricehist.core.exceptions import ResponseParseError
from pricehist.core.logging import get_logger
from pricehist.core.models import TradingDayPrices
from pricehist.core.patterns.throttle import Throttle

logger = get_logger(__name__)

# 需要的列, 按名称匹配 (忽略大小写)
REQUIRED_COLUMNS = ("date", "open", "high", "low", "close")


class QuandlProvider(EquityProvider):
    """Quandl时间序列数据集提供商.

    ``GET {endpoint}/api/v3/datasets/{dataset}/{ticker}.json`` with an
    inclusive ``end_date``, so the exclusive end is moved back one day.
    """

    name = "quandl"
    BASE_URL = "https://www.quandl.com"

    async def fetch(
        self,
        dataset: str,
        ticker_symbol: str,
        inclusive_start: date,
        exclusive_end: date,
        throttle: Throttle,
    ) -> list[TradingDayPrices]:
        url = f"{self.endpoint}/api/v3/datasets/{dataset}/{ticker_symbol}.json"
        params: dict[str, Any] = {
            "start_date": inclusive_start.isoformat(),
            "end_date": (exclusive_end - timedelta(days=1)).isoformat(),
            "order": "asc",
        }
        if self.api_key:
            params["api_key"] = self.api_key

        payload = await self._get_json(url, params, throttle)
        prices = self._parse(payload, ticker_symbol)

        logger.debug(f"Parsed {len(prices)} trading days", ticker=ticker_symbol, dataset=dataset, provider=self.name)
        return prices

    def _parse(self, payload: Any, ticker_symbol: str) -> list[TradingDayPrices]:
        dataset = payload.get("dataset") if isinstance(payload, dict) else None
        if not isinstance(dataset, dict):
            raise ResponseParseError("Quandl response is missing the dataset object", self.name)

        column_names = dataset.get("column_names")
        rows = dataset.get("data")
        if not isinstance(column_names, list) or not isinstance(rows, list):
            raise ResponseParseError("Quandl dataset is missing column_names or data", self.name)

        index = {str(name).lower(): position for position, name in enumerate(column_names)}
        missing = [column for column in REQUIRED_COLUMNS if column not in index]
        if missing:
            raise ResponseParseError(
                f"Quandl dataset is missing columns: {', '.join(missing)}",
                self.name,
                details={"column_names": column_names},
            )

        prices: list[TradingDayPrices] = []
        for row in rows:
            try:
                prices.append(
                    TradingDayPrices(
                        ticker_symbol=ticker_symbol,
                        trading_date=date.fromisoformat(row[index["date"]]),
                        open_price=row[index["open"]],
                        high_price=row[index["high"]],
                        low_price=row[index["low"]],
                        close_price=row[index["close"]],
                    )
                )
            except (IndexError, TypeError, ValueError, ArithmeticError) as e:
                raise ResponseParseError(f"Malformed Quandl row {row!r}: {e}", self.name) from e
        return prices


__all__ = ["QuandlProvider"]
