"""Trading calendar shared by every position of a portfolio."""
from __future__ import annotations

from bisect import bisect_left, bisect_right
from datetime import date
from typing import Iterable, Iterator, List, Sequence

from .models import Quote


class TradingCalendar:
    """Sorted set of the dates on which at least one instrument traded."""

    def __init__(self, dates: Iterable[date] = ()) -> None:
        self._dates: List[date] = sorted(set(dates))

    @classmethod
    def from_quotes(cls, series: Iterable[Sequence[Quote]]) -> "TradingCalendar":
        return cls(quote.day for quotes in series for quote in quotes)

    def __iter__(self) -> Iterator[date]:
        return iter(self._dates)

    def __len__(self) -> int:
        return len(self._dates)

    def __repr__(self) -> str:
        return f"TradingCalendar({len(self)} dates)"

    def between(self, after: date, before: date) -> List[date]:
        """Return the calendar dates strictly between ``after`` and ``before``."""

        lo = bisect_right(self._dates, after)
        hi = bisect_left(self._dates, before)
        return self._dates[lo:hi]


__all__ = ["TradingCalendar"]
