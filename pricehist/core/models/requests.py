"""Retrieval request and retrieved month models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, ConfigDict, model_validator

from pricehist.core.models.calendar import YearMonth


class RetrievalRequest(BaseModel):
    """A half-open ``[inclusive_start, exclusive_end)`` span of daily prices for one ticker."""

    model_config = ConfigDict(frozen=True)

    dataset: str
    ticker_symbol: str
    inclusive_start: date
    exclusive_end: date

    @model_validator(mode="after")
    def _check_range(self) -> RetrievalRequest:
        if self.inclusive_start >= self.exclusive_end:
            raise ValueError(
                f"inclusive_start {self.inclusive_start} must be before exclusive_end {self.exclusive_end}"
            )
        return self

    def with_exclusive_end(self, exclusive_end: date) -> RetrievalRequest:
        return self.model_copy(update={"exclusive_end": exclusive_end})

    def __str__(self) -> str:
        return f"{self.dataset}/{self.ticker_symbol} [{self.inclusive_start}, {self.exclusive_end})"


@dataclass(frozen=True)
class RetrievedMonth:
    """Marks a ticker's trading data for one calendar month as fully present locally."""

    ticker_symbol: str
    year_month: YearMonth

    @classmethod
    def of(cls, ticker_symbol: str, day: date) -> RetrievedMonth:
        return cls(ticker_symbol, YearMonth.of(day))


__all__ = ["RetrievalRequest", "RetrievedMonth"]
