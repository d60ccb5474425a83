"""Quote provider dependency for API routes."""

from __future__ import annotations

from modus.returns import QuoteSource
from modus.yahoo import get_yahoo_client


def get_quote_source() -> QuoteSource:
    """Return the shared quote provider; overridden in tests."""

    return get_yahoo_client()
