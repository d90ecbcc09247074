"""Trading month boundary rules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from pricehist.core.models.calendar import YearMonth

MONDAY = 0
FRIDAY = 4


@dataclass(frozen=True)
class TradingMonthCalendar:
    """Decides whether a date marks the first or last trading day of its month.

    Market data carries no weekend rows, so a month whose 1st falls on a
    Saturday begins on the following Monday and a month whose last day falls
    on a Sunday ends on the preceding Friday.
    """

    opening_window_days: int = 6
    closing_window_days: int = 3

    def has_begun(self, day: date) -> bool:
        """True when ``day`` is the 1st or the first Monday of its month."""

        if day.day == 1:
            return True
        return day.weekday() == MONDAY and day.day <= self.opening_window_days

    def is_complete(self, day: date) -> bool:
        """True when ``day`` is the last day or a closing Friday of its month."""

        month_length = YearMonth.of(day).length
        if day.day == month_length:
            return True
        return day.weekday() == FRIDAY and month_length - day.day < self.closing_window_days


default_calendar = TradingMonthCalendar()


__all__ = ["FRIDAY", "MONDAY", "TradingMonthCalendar", "default_calendar"]
