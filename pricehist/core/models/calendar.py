"""Calendar month value type."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month, ordered chronologically."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be within 1..12, got {self.month}")

    @classmethod
    def of(cls, day: date) -> YearMonth:
        return cls(day.year, day.month)

    @property
    def length(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.length)

    def plus_months(self, months: int) -> YearMonth:
        index = self.year * 12 + (self.month - 1) + months
        return YearMonth(index // 12, index % 12 + 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def first_of_next_month(day: date) -> date:
    """Return the 1st of the month following ``day``."""

    return YearMonth.of(day).plus_months(1).first_day


def plus_months(day: date, months: int) -> date:
    """Shift ``day`` by whole months, clamping to the target month's length."""

    target = YearMonth.of(day).plus_months(months)
    return date(target.year, target.month, min(day.day, target.length))


def is_whole_month(inclusive_start: date, exclusive_end: date) -> bool:
    """True when ``[inclusive_start, exclusive_end)`` is exactly one calendar month."""

    return inclusive_start.day == 1 and exclusive_end == first_of_next_month(inclusive_start)


def days_between(inclusive_start: date, exclusive_end: date) -> list[date]:
    span = (exclusive_end - inclusive_start).days
    return [inclusive_start + timedelta(days=offset) for offset in range(span)]


__all__ = ["YearMonth", "days_between", "first_of_next_month", "is_whole_month", "plus_months"]
