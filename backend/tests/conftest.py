import asyncio
import inspect
import json
import pathlib
import sys
from datetime import date, datetime, time, timezone

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from modus.models import Quote  # noqa: E402


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**pyfuncitem.funcargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


def session_timestamp(day: date, at: time = time(14, 30)) -> int:
    """Unix timestamp of a US session open on ``day``."""

    return int(datetime.combine(day, at, tzinfo=timezone.utc).timestamp())


def make_quote(day: date, close: float, adjclose: float | None = None, *, at: time = time(14, 30)) -> Quote:
    return Quote(
        timestamp=session_timestamp(day, at),
        open=close,
        high=close,
        low=close,
        volume=1000,
        close=close,
        adjclose=close if adjclose is None else adjclose,
    )


class FakeQuoteSource:
    """In-memory quote provider for engine tests.

    ``fx_rates`` maps a ticker to its USD rate per calendar date; missing
    entries are USD.
    """

    def __init__(
        self,
        series: dict[str, list[Quote]],
        fx_rates: dict[str, dict[date, float]] | None = None,
    ) -> None:
        self._series = series
        self._fx_rates = fx_rates or {}
        self.calls: list[tuple[str, str, datetime, datetime]] = []

    async def fetch_usd_quotes(self, ticker: str, start: datetime, end: datetime) -> list[Quote]:
        self.calls.append(("quotes", ticker, start, end))
        lo, hi = start.timestamp(), end.timestamp()
        return [q for q in self._series[ticker] if lo <= q.timestamp <= hi]

    async def resolve_fx_rate(self, ticker: str, at: datetime) -> float:
        self.calls.append(("fx", ticker, at, at))
        return self._fx_rates.get(ticker, {}).get(at.date(), 1.0)


def chart_row(day: date, close: float | None, adjclose: float | None = None, *, at: time = time(14, 30), **fields):
    row = {
        "timestamp": session_timestamp(day, at),
        "open": close,
        "high": close,
        "low": close,
        "close": close,
        "volume": 100,
        "adjclose": close if adjclose is None else adjclose,
    }
    row.update(fields)
    return row


def chart_payload(symbol: str, rows: list[dict], *, currency: str = "USD", with_adjclose: bool = True) -> dict:
    """Build a ``/v8/finance/chart`` envelope from row dicts."""

    columns = {key: [row.get(key) for row in rows] for key in ("open", "high", "low", "close", "volume")}
    indicators: dict = {"quote": [columns]}
    if with_adjclose:
        indicators["adjclose"] = [{"adjclose": [row.get("adjclose") for row in rows]}]
    meta = {
        "currency": currency,
        "symbol": symbol,
        "exchangeName": "NMS",
        "instrumentType": "EQUITY",
        "regularMarketPrice": 1.0,
    }
    return {
        "chart": {
            "result": [{"meta": meta, "timestamp": [row["timestamp"] for row in rows], "indicators": indicators}],
            "error": None,
        }
    }


class StubResponse:
    def __init__(self, payload: object = None, status_code: int = 200, text: str | None = None) -> None:
        self._payload = payload
        self.status_code = status_code
        self._text = text

    @property
    def text(self) -> str:
        return self._text if self._text is not None else json.dumps(self._payload)

    def json(self) -> object:
        if self._text is not None:
            return json.loads(self._text)
        return self._payload


class StubClient:
    """Replays a fixed response and records every request."""

    def __init__(self, response: StubResponse | None = None) -> None:
        self.response = response or StubResponse({})
        self.calls: list[dict[str, object]] = []

    async def get(self, url: str, params: dict[str, object], headers: dict[str, str]) -> StubResponse:
        self.calls.append({"url": url, "params": params, "headers": headers})
        return self.response

    async def aclose(self) -> None:  # pragma: no cover - included for interface completeness
        return None


class ChartStubClient(StubClient):
    """Serves per-ticker chart rows, filtered by the requested calendar dates."""

    def __init__(self, instruments: dict[str, tuple[str, list[dict]]]) -> None:
        super().__init__()
        self._instruments = instruments

    async def get(self, url: str, params: dict[str, object], headers: dict[str, str]) -> StubResponse:
        self.calls.append({"url": url, "params": params, "headers": headers})
        ticker = url.rsplit("/", 1)[-1]
        if ticker not in self._instruments:
            return StubResponse({"chart": {"result": None, "error": {"code": "Not Found"}}}, status_code=404)
        currency, rows = self._instruments[ticker]
        first = datetime.fromtimestamp(int(params["period1"]), tz=timezone.utc).date()
        last = datetime.fromtimestamp(int(params["period2"]), tz=timezone.utc).date()
        selected = [
            row
            for row in rows
            if first <= datetime.fromtimestamp(row["timestamp"], tz=timezone.utc).date() <= last
        ]
        return StubResponse(chart_payload(ticker, selected, currency=currency))
