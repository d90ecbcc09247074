"""Alpha Vantage数据提供商实现."""

from datetime import date
from typing import Any

from pricehist.core.data.providers.base import EquityProvider
from pricehist.core.exceptions import RateLimitError, ResponseParseError, RetrievalError
from pricehist.core.logging import get_logger
from pricehist.core.models import TradingDayPrices
from pricehist.core.patterns.throttle import Throttle

logger = get_logger(__name__)

TIME_SERIES_KEY = "Time Series (Daily)"
PRICE_FIELDS = {
    "open_price": "1. open",
    "high_price": "2. high",
    "low_price": "3. low",
    "close_price": "4. close",
}


class AlphaVantageProvider(EquityProvider):
    """Alpha Vantage日线数据提供商.

    The daily series endpoint returns the whole history, so rows outside
    ``[inclusive_start, exclusive_end)`` are dropped locally. The dataset
    argument is ignored.
    """

    name = "alpha_vantage"
    BASE_URL = "https://www.alphavantage.co"

    async def fetch(
        self,
        dataset: str,
        ticker_symbol: str,
        inclusive_start: date,
        exclusive_end: date,
        throttle: Throttle,
    ) -> list[TradingDayPrices]:
        params: dict[str, Any] = {
            "function": "TIME_SERIES_DAILY",
            "symbol": ticker_symbol,
            "outputsize": "full",
        }
        if self.api_key:
            params["apikey"] = self.api_key

        payload = await self._get_json(f"{self.endpoint}/query", params, throttle)
        prices = [
            price
            for price in self._parse(payload, ticker_symbol)
            if inclusive_start <= price.trading_date < exclusive_end
        ]
        prices.sort(key=lambda price: price.trading_date)

        logger.debug(f"Parsed {len(prices)} trading days", ticker=ticker_symbol, provider=self.name)
        return prices

    def _parse(self, payload: Any, ticker_symbol: str) -> list[TradingDayPrices]:
        if not isinstance(payload, dict):
            raise ResponseParseError("AlphaVantage response is not a JSON object", self.name)

        if "Note" in payload:
            raise RateLimitError(f"AlphaVantage rate limit: {payload['Note']}", self.name)

        if "Error Message" in payload:
            raise RetrievalError(
                f"AlphaVantage API error: {payload['Error Message']}",
                details={"provider": self.name, "ticker": ticker_symbol},
            )

        series = payload.get(TIME_SERIES_KEY)
        if not isinstance(series, dict):
            raise ResponseParseError(f"AlphaVantage response is missing '{TIME_SERIES_KEY}'", self.name)

        prices: list[TradingDayPrices] = []
        for trading_date, values in series.items():
            try:
                prices.append(
                    TradingDayPrices(
                        ticker_symbol=ticker_symbol,
                        trading_date=date.fromisoformat(trading_date),
                        **{field: values[key] for field, key in PRICE_FIELDS.items()},
                    )
                )
            except (KeyError, TypeError, ValueError, ArithmeticError) as e:
                raise ResponseParseError(f"Malformed AlphaVantage entry for {trading_date}: {e}", self.name) from e
        return prices


__all__ = ["AlphaVantageProvider"]
