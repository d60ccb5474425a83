"""Portfolio performance.

Most portfolio performance figures depend on how much was invested and when,
which makes them useless for comparison. This module builds a time-weighted
curve instead: every day's aggregate value is divided by the aggregate capital
at the start of that day, and the daily ratios are chained into a cumulative
percentage return since inception.

Prices are normalized to USD and the close/adjusted-close ratio is applied on
the first and last day of each position so the user's literal buy and sell
prices line up with the provider's dividend/split adjusted series.
"""

from __future__ import annotations

import logging
import operator
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from itertools import accumulate
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Protocol, Tuple

from .calendar import TradingCalendar
from .errors import DataInconsistencyError, InvalidDateError
from .models import Equity, Portfolio, Position, Quote
from .yahoo import get_yahoo_client

logger = logging.getLogger(__name__)

DatedPosition = Tuple[date, Position]


class QuoteSource(Protocol):
    """What the engine needs from a quote provider."""

    async def fetch_usd_quotes(self, ticker: str, start: datetime, end: datetime) -> List[Quote]:
        ...

    async def resolve_fx_rate(self, ticker: str, at: datetime) -> float:
        ...


@dataclass(frozen=True)
class DailyAggregate:
    """Capital at the start of a day and value at its end, across positions."""

    capital: float
    value: float

    @property
    def rate(self) -> float:
        return self.value / self.capital


class _Carry(NamedTuple):
    old_price: float
    previous_day: Optional[date]


@dataclass(frozen=True)
class _EquityFold:
    """Constants needed to turn one equity's quotes into daily positions."""

    quantity: int
    start_fx: float
    end_fx: float
    sell_price: Optional[float]
    last_index: int
    calendar: TradingCalendar

    def step(self, carry: _Carry, index: int, quote: Quote) -> Tuple[List[DatedPosition], _Carry]:
        day = quote.day
        emitted: List[DatedPosition] = []

        # Dates other instruments traded on but this one skipped contribute a flat position.
        if carry.previous_day is not None:
            for missing in self.calendar.between(carry.previous_day, day):
                emitted.append((missing, Position(carry.old_price, carry.old_price, self.quantity)))

        if index == self.last_index:
            ratio = self._adjustment(quote, self.end_fx)
            price = self.sell_price * ratio if self.sell_price is not None else quote.adjclose
            position = Position(carry.old_price * ratio, price, self.quantity)
        elif index == 0:
            ratio = self._adjustment(quote, self.start_fx)
            position = Position(carry.old_price * ratio, quote.close * self.start_fx * ratio, self.quantity)
        else:
            position = Position(carry.old_price, quote.adjclose, self.quantity)
        emitted.append((day, position))

        # The last day's starting capital must already be in post-FX terms.
        if index == self.last_index - 1:
            next_old_price = quote.close * self.end_fx
        else:
            next_old_price = quote.adjclose
        return emitted, _Carry(next_old_price, day)

    @staticmethod
    def _adjustment(quote: Quote, fx: float) -> float:
        # adjclose is already in USD while close is native, so convert close first.
        if not quote.adjclose:
            raise DataInconsistencyError(f"Missing adjusted close on {quote.day.isoformat()}")
        return quote.close * fx / quote.adjclose


def equity_range(equity: Equity, now: datetime | None = None) -> Tuple[datetime, datetime]:
    """Return the query range: buy-day midnight to sell-day 23:59:59 (or now)."""

    start = datetime.combine(equity.buy.date.to_date(), time(0, 0, 0), tzinfo=timezone.utc)
    if equity.sell is None:
        end = now or datetime.now(timezone.utc)
        if end.tzinfo is None:
            end = end.replace(tzinfo=timezone.utc)
    else:
        end = datetime.combine(equity.sell.date.to_date(), time(23, 59, 59), tzinfo=timezone.utc)
    if end < start:
        raise InvalidDateError(f"{equity.ticker} is sold before it is bought")
    return start, end


def portfolio_range(portfolio: Portfolio, now: datetime | None = None) -> Tuple[datetime, datetime]:
    ranges = [equity_range(equity, now) for equity in portfolio]
    return min(start for start, _ in ranges), max(end for _, end in ranges)


async def trading_calendar(
    portfolio: Portfolio,
    provider: QuoteSource,
    now: datetime | None = None,
) -> TradingCalendar:
    """Fetch every equity over the portfolio-wide range and collect the dates seen."""

    start, end = portfolio_range(portfolio, now)
    series: List[List[Quote]] = []
    for equity in portfolio:
        series.append(await provider.fetch_usd_quotes(equity.ticker, start, end))
    return TradingCalendar.from_quotes(series)


def equity_positions(
    equity: Equity,
    quotes: List[Quote],
    calendar: TradingCalendar,
    start_fx: float,
    end_fx: float,
) -> List[DatedPosition]:
    """Fold one equity's quote series into dated positions."""

    fold = _EquityFold(
        quantity=equity.quantity,
        start_fx=start_fx,
        end_fx=end_fx,
        sell_price=equity.sell.price * end_fx if equity.sell is not None else None,
        last_index=len(quotes) - 1,
        calendar=calendar,
    )
    carry = _Carry(old_price=equity.buy.price * start_fx, previous_day=None)
    positions: List[DatedPosition] = []
    for index, quote in enumerate(quotes):
        emitted, carry = fold.step(carry, index, quote)
        positions.extend(emitted)
    return positions


def daily_aggregates(positions: Iterable[DatedPosition]) -> Dict[date, DailyAggregate]:
    """Sum capital and value per date across every contributed position."""

    capital: Dict[date, float] = defaultdict(float)
    value: Dict[date, float] = defaultdict(float)
    for day, position in positions:
        capital[day] += position.capital
        value[day] += position.value
    return {day: DailyAggregate(capital[day], value[day]) for day in sorted(capital)}


def cumulative_returns(rates: Mapping[date, float]) -> Dict[str, float]:
    """Chain daily rates into percentage growth since the first date."""

    days = sorted(rates)
    growth = accumulate((rates[day] for day in days), operator.mul)
    return {day.isoformat(): (cumulative - 1.0) * 100.0 for day, cumulative in zip(days, growth)}


async def total_returns(
    portfolio: Portfolio,
    provider: QuoteSource | None = None,
    *,
    now: datetime | None = None,
) -> Dict[str, float]:
    """Return the ``YYYY-MM-DD`` -> cumulative percentage return curve.

    Fetches run sequentially in portfolio order. Any error aborts the whole
    computation; no partial curve is returned.
    """

    if not len(portfolio):
        return {}
    provider = provider or get_yahoo_client()
    now = now or datetime.now(timezone.utc)
    logger.info("Computing returns for %d equities", len(portfolio))

    calendar = await trading_calendar(portfolio, provider, now)

    positions: List[DatedPosition] = []
    for equity in portfolio:
        start, end = equity_range(equity, now)
        start_fx = await provider.resolve_fx_rate(equity.ticker, start)
        end_fx = await provider.resolve_fx_rate(equity.ticker, end)
        quotes = await provider.fetch_usd_quotes(equity.ticker, start, end)
        logger.debug(
            "%s: %d quotes, fx %.6f -> %.6f", equity.ticker, len(quotes), start_fx, end_fx
        )
        positions.extend(equity_positions(equity, quotes, calendar, start_fx, end_fx))

    aggregates = daily_aggregates(positions)
    curve = cumulative_returns({day: aggregate.rate for day, aggregate in aggregates.items()})
    logger.info("Computed %d daily returns over %d calendar dates", len(curve), len(calendar))
    return curve


__all__ = [
    "DailyAggregate",
    "QuoteSource",
    "cumulative_returns",
    "daily_aggregates",
    "equity_positions",
    "equity_range",
    "portfolio_range",
    "total_returns",
    "trading_calendar",
]
