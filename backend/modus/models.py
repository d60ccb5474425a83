"""Domain models used by the portfolio return engine."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional, Tuple

from .errors import from_date_error


@dataclass(frozen=True)
class TransactionDate:
    """A calendar date as supplied by the caller, validated lazily."""

    year: int
    month: int
    day: int

    def to_date(self) -> date:
        """Return the ``date`` this triple names or raise ``InvalidDateError``."""

        try:
            return date(self.year, self.month, self.day)
        except ValueError as exc:
            raise from_date_error(exc, self.year, self.month, self.day) from exc


@dataclass(frozen=True)
class Transaction:
    """A buy or sell at a price in the instrument's native currency."""

    date: TransactionDate
    price: float


@dataclass(frozen=True)
class Equity:
    """A position bought once and optionally sold once."""

    ticker: str
    buy: Transaction
    quantity: int
    sell: Optional[Transaction] = None


@dataclass(frozen=True)
class Portfolio:
    """Ordered, immutable collection of equity positions."""

    equities: Tuple[Equity, ...] = ()

    def __iter__(self):
        return iter(self.equities)

    def __len__(self) -> int:
        return len(self.equities)


@dataclass(frozen=True)
class Quote:
    """One trading day's record for an instrument."""

    timestamp: int
    open: float
    high: float
    low: float
    volume: int
    close: float
    adjclose: float

    @property
    def day(self) -> date:
        """Calendar date of the session, in UTC."""

        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).date()


@dataclass(frozen=True)
class QuoteMetadata:
    """Instrument description returned alongside a quote series."""

    currency: str
    symbol: str
    exchange_name: str
    instrument_type: str


@dataclass(frozen=True)
class Position:
    """Per-day, per-instrument valuation already expressed in USD."""

    old_price: float
    price: float
    quantity: int

    @property
    def capital(self) -> float:
        return self.old_price * self.quantity

    @property
    def value(self) -> float:
        return self.price * self.quantity
