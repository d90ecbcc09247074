"""Trading day price model."""

from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

TWO_DECIMAL_PLACES = Decimal("0.01")


class TradingDayPrices(BaseModel):
    """单个交易日的开高低收价格."""

    model_config = ConfigDict(frozen=True)

    ticker_symbol: str
    trading_date: date
    open_price: Decimal
    high_price: Decimal
    low_price: Decimal
    close_price: Decimal

    @field_validator("open_price", "high_price", "low_price", "close_price", mode="before")
    @classmethod
    def round_price(cls, value: object) -> Decimal:
        """Round to two decimal places, banker's rounding."""
        try:
            return Decimal(str(value)).quantize(TWO_DECIMAL_PLACES, rounding=ROUND_HALF_EVEN)
        except InvalidOperation as e:
            raise ValueError(f"not a price: {value!r}") from e

    @field_serializer("open_price", "high_price", "low_price", "close_price", when_used="json")
    def serialize_decimal(self, value: Decimal) -> str:
        return str(value)


__all__ = ["TradingDayPrices"]
