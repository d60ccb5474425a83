"""Core package for time-weighted portfolio returns and option valuation."""

from .errors import ErrorKind, InvalidDateError, ModusError, QuoteProviderError
from .models import Equity, Portfolio, Quote, Transaction, TransactionDate
from .returns import total_returns
from .yahoo import YahooFinanceClient, get_yahoo_client

__all__ = [
    "Equity",
    "ErrorKind",
    "InvalidDateError",
    "ModusError",
    "Portfolio",
    "Quote",
    "QuoteProviderError",
    "Transaction",
    "TransactionDate",
    "YahooFinanceClient",
    "get_yahoo_client",
    "total_returns",
]
