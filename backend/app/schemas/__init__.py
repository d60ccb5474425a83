"""Pydantic schema exports."""

from .options import KellyResponse, MonteCarloValueResponse, OptionPriceResponse, OptionRequest
from .returns import (
    EquitySchema,
    ErrorDetail,
    ErrorResponse,
    PortfolioRequest,
    TransactionDateSchema,
    TransactionSchema,
)

__all__ = [
    "EquitySchema",
    "ErrorDetail",
    "ErrorResponse",
    "KellyResponse",
    "MonteCarloValueResponse",
    "OptionPriceResponse",
    "OptionRequest",
    "PortfolioRequest",
    "TransactionDateSchema",
    "TransactionSchema",
]
