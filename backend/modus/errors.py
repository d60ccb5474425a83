"""Error family raised by the quote provider and the return engine.

Every failure surfaces as exactly one ``ModusError`` subclass, tagged with an
``ErrorKind`` so callers (the HTTP layer, the CLI) can branch on ``exc.kind``
without caring which library produced the underlying problem.
"""

from __future__ import annotations

from enum import Enum

import httpx
from pydantic import ValidationError


class ErrorKind(str, Enum):
    INVALID_DATE = "invalid_date"
    FETCH_FAILED = "fetch_failed"
    DESERIALIZE_FAILED = "deserialize_failed"
    EMPTY_DATA_SET = "empty_data_set"
    DATA_INCONSISTENCY = "data_inconsistency"
    PROVIDER = "provider"


class ModusError(RuntimeError):
    """Base class for every error the library raises."""

    kind: ErrorKind = ErrorKind.PROVIDER


class InvalidDateError(ModusError):
    """Raised when a transaction date is not a valid calendar date."""

    kind = ErrorKind.INVALID_DATE


class QuoteProviderError(ModusError):
    """Base class for failures talking to the market-data endpoint."""


class FetchFailedError(QuoteProviderError):
    """Raised on transport failures or non-2xx responses."""

    kind = ErrorKind.FETCH_FAILED

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DeserializeError(QuoteProviderError):
    """Raised when the response body is not valid JSON."""

    kind = ErrorKind.DESERIALIZE_FAILED


class EmptyDataSetError(QuoteProviderError):
    """Raised when the provider returns no rows for the requested range."""

    kind = ErrorKind.EMPTY_DATA_SET


class DataInconsistencyError(QuoteProviderError):
    """Raised when the per-day arrays of a response disagree in length."""

    kind = ErrorKind.DATA_INCONSISTENCY


class ProviderFailureError(QuoteProviderError):
    """Raised when a JSON payload parses but does not have the expected shape."""

    kind = ErrorKind.PROVIDER


def from_transport_error(exc: httpx.HTTPError) -> FetchFailedError:
    return FetchFailedError(f"Failed to reach market data provider: {exc}")


def from_json_error(exc: ValueError) -> DeserializeError:
    return DeserializeError(f"Market data provider returned invalid JSON: {exc}")


def from_validation_error(exc: ValidationError) -> ProviderFailureError:
    return ProviderFailureError(
        f"Market data provider returned an unexpected payload ({exc.error_count()} schema errors)"
    )


def from_date_error(exc: ValueError, year: int, month: int, day: int) -> InvalidDateError:
    return InvalidDateError(f"Invalid calendar date {year:04d}-{month:02d}-{day:02d}: {exc}")


__all__ = [
    "DataInconsistencyError",
    "DeserializeError",
    "EmptyDataSetError",
    "ErrorKind",
    "FetchFailedError",
    "InvalidDateError",
    "ModusError",
    "ProviderFailureError",
    "QuoteProviderError",
    "from_date_error",
    "from_json_error",
    "from_transport_error",
    "from_validation_error",
]
