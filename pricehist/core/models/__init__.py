"""Core data models."""

from pricehist.core.models.calendar import YearMonth
from pricehist.core.models.prices import TradingDayPrices
from pricehist.core.models.requests import RetrievalRequest, RetrievedMonth

__all__ = ["RetrievalRequest", "RetrievedMonth", "TradingDayPrices", "YearMonth"]
