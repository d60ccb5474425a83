"""FX conversion helpers."""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Dict, List, Sequence

from .errors import EmptyDataSetError
from .models import Quote

BASE_CURRENCY = "USD"


def fx_pair(currency: str) -> str:
    """Return the synthetic ticker quoting ``currency`` against USD."""

    return f"{currency.upper()}=X"


def convert_to_usd(quotes: Sequence[Quote], fx_quotes: Sequence[Quote]) -> List[Quote]:
    """Scale each quote's adjusted close by the FX rate of the same calendar day.

    FX and equity sessions close at different times, so rates are matched by
    UTC date rather than by timestamp. Days without an FX quote fall back to
    the most recent FX quote in ``fx_quotes``. Open/high/low/close stay in the
    native currency.
    """

    if not quotes:
        return []
    if not fx_quotes:
        raise EmptyDataSetError("FX series is empty; cannot convert quotes to USD")

    rates: Dict[date, Quote] = {}
    for fx in fx_quotes:
        rates.setdefault(fx.day, fx)
    fallback = fx_quotes[-1]

    return [replace(q, adjclose=q.adjclose * rates.get(q.day, fallback).adjclose) for q in quotes]


__all__ = ["BASE_CURRENCY", "convert_to_usd", "fx_pair"]
