"""Yahoo! Finance chart client used as the quote provider."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, List

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .config import ModusSettings, get_settings
from .errors import (
    DataInconsistencyError,
    EmptyDataSetError,
    FetchFailedError,
    ProviderFailureError,
    QuoteProviderError,
    from_json_error,
    from_transport_error,
    from_validation_error,
)
from .fx import BASE_CURRENCY, convert_to_usd, fx_pair
from .models import Quote, QuoteMetadata

logger = logging.getLogger(__name__)


class ChartMeta(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    currency: str
    symbol: str
    exchange_name: str
    instrument_type: str


class QuoteColumns(BaseModel):
    open: List[float | None] = Field(default_factory=list)
    high: List[float | None] = Field(default_factory=list)
    low: List[float | None] = Field(default_factory=list)
    close: List[float | None] = Field(default_factory=list)
    volume: List[int | None] = Field(default_factory=list)


class AdjCloseColumn(BaseModel):
    adjclose: List[float | None] = Field(default_factory=list)


class Indicators(BaseModel):
    quote: List[QuoteColumns] = Field(default_factory=list)
    adjclose: List[AdjCloseColumn] | None = None

    def quote_at(self, timestamp: int, i: int) -> Quote | None:
        """Materialize row ``i``; rows without a close are rejected."""

        columns = self.quote[0]
        close = columns.close[i]
        if close is None:
            return None
        adjclose = self.adjclose[0].adjclose[i] if self.adjclose else None
        return Quote(
            timestamp=timestamp,
            open=columns.open[i] or 0.0,
            high=columns.high[i] or 0.0,
            low=columns.low[i] or 0.0,
            volume=columns.volume[i] or 0,
            close=close,
            adjclose=adjclose or 0.0,
        )


class ChartResult(BaseModel):
    meta: ChartMeta
    timestamp: List[int] = Field(default_factory=list)
    indicators: Indicators = Field(default_factory=Indicators)

    def check_consistency(self) -> None:
        n = len(self.timestamp)
        if n == 0:
            raise EmptyDataSetError(f"No quotes returned for {self.meta.symbol}")
        if not self.indicators.quote:
            raise DataInconsistencyError(f"Quote block missing for {self.meta.symbol}")
        columns = self.indicators.quote[0]
        lengths = {len(columns.open), len(columns.high), len(columns.low), len(columns.close), len(columns.volume)}
        if self.indicators.adjclose:
            lengths.add(len(self.indicators.adjclose[0].adjclose))
        if lengths != {n}:
            raise DataInconsistencyError(
                f"Quote arrays for {self.meta.symbol} do not match {n} timestamps"
            )


class Chart(BaseModel):
    result: List[ChartResult] | None = None
    error: Any = None


class ChartResponse(BaseModel):
    """Envelope returned by the ``/v8/finance/chart`` endpoint."""

    chart: Chart

    def _block(self) -> ChartResult:
        if not self.chart.result:
            if self.chart.error:
                raise ProviderFailureError(f"Market data provider reported an error: {self.chart.error}")
            raise EmptyDataSetError("Market data provider returned no result block")
        return self.chart.result[0]

    def check_consistency(self) -> None:
        self._block()
        for block in self.chart.result or []:
            block.check_consistency()

    def quotes(self) -> list[Quote]:
        """Return the validated series, skipping days without a close."""

        self.check_consistency()
        block = self._block()
        quotes: list[Quote] = []
        for i, timestamp in enumerate(block.timestamp):
            quote = block.indicators.quote_at(timestamp, i)
            if quote is not None:
                quotes.append(quote)
        return quotes

    def metadata(self) -> QuoteMetadata:
        meta = self._block().meta
        return QuoteMetadata(
            currency=meta.currency,
            symbol=meta.symbol,
            exchange_name=meta.exchange_name,
            instrument_type=meta.instrument_type,
        )


def _unix(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp())


class YahooFinanceClient:
    """Daily-history client with USD normalization helpers."""

    def __init__(
        self,
        *,
        settings: ModusSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._base_url = settings.yahoo_base_url.rstrip("/")
        self._user_agent = settings.yahoo_user_agent
        self._interval = settings.yahoo_interval
        self._events = settings.yahoo_events
        self._client = client or httpx.AsyncClient(timeout=settings.yahoo_timeout_seconds)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def chart(self, ticker: str, start: datetime, end: datetime) -> ChartResponse:
        """Issue one chart request for ``[start, end]`` and parse the envelope."""

        params = {
            "symbol": ticker,
            "period1": _unix(start),
            "period2": _unix(end),
            "interval": self._interval,
            "events": self._events,
        }
        headers = {"User-Agent": self._user_agent}
        url = f"{self._base_url}/{ticker}"
        logger.debug("Fetching %s from %s to %s", ticker, params["period1"], params["period2"])
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise from_transport_error(exc) from exc

        if not 200 <= response.status_code < 300:
            logger.warning("Market data provider returned %s for %s", response.status_code, ticker)
            raise FetchFailedError(
                f"Market data provider error {response.status_code} for {ticker}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise from_json_error(exc) from exc

        try:
            return ChartResponse.model_validate(payload)
        except ValidationError as exc:
            raise from_validation_error(exc) from exc

    async def fetch_quotes(self, ticker: str, start: datetime, end: datetime) -> list[Quote]:
        """Return the daily series for ``ticker`` in its native currency."""

        response = await self.chart(ticker, start, end)
        return response.quotes()

    async def fetch_usd_quotes(self, ticker: str, start: datetime, end: datetime) -> list[Quote]:
        """Return the daily series with adjusted closes converted to USD."""

        response = await self.chart(ticker, start, end)
        quotes = response.quotes()
        currency = response.metadata().currency
        if currency == BASE_CURRENCY:
            return quotes
        fx_quotes = await self.fetch_quotes(fx_pair(currency), start, end)
        return convert_to_usd(quotes, fx_quotes)

    async def currency(self, ticker: str) -> str:
        now = datetime.now(timezone.utc)
        response = await self.chart(ticker, now, now)
        return response.metadata().currency

    async def resolve_fx_rate(self, ticker: str, at: datetime) -> float:
        """Return the USD rate of ``ticker``'s currency at ``at``.

        An instrument whose currency cannot be determined is treated as USD.
        """

        try:
            currency = await self.currency(ticker)
        except QuoteProviderError as exc:
            logger.warning("Currency lookup for %s failed (%s); assuming USD", ticker, exc.kind.value)
            return 1.0
        if currency == BASE_CURRENCY:
            return 1.0

        pair = fx_pair(currency)
        quotes = await self.fetch_quotes(pair, at, at)
        if not quotes:
            raise ProviderFailureError(f"No {pair} quote available on {at:%Y-%m-%d}")
        logger.debug("Resolved %s at %s to %s", pair, at.date(), quotes[0].close)
        return quotes[0].close


@lru_cache()
def get_yahoo_client() -> YahooFinanceClient:
    """Return a shared client instance."""

    return YahooFinanceClient()


__all__ = [
    "ChartResponse",
    "YahooFinanceClient",
    "get_yahoo_client",
]
