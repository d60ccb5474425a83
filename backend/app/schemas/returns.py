"""Pydantic schemas for the portfolio returns endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field

from modus.models import Equity, Portfolio, Transaction, TransactionDate


class TransactionDateSchema(BaseModel):
    # Range checks are left to the engine so bad dates surface as invalid_date.
    year: int
    month: int
    day: int

    def to_domain(self) -> TransactionDate:
        return TransactionDate(year=self.year, month=self.month, day=self.day)


class TransactionSchema(BaseModel):
    date: TransactionDateSchema
    price: float = Field(..., gt=0)

    def to_domain(self) -> Transaction:
        return Transaction(date=self.date.to_domain(), price=self.price)


class EquitySchema(BaseModel):
    ticker: str = Field(..., min_length=1, examples=["MSFT"])
    buy: TransactionSchema
    sell: TransactionSchema | None = None
    quantity: int = Field(..., gt=0)

    def to_domain(self) -> Equity:
        return Equity(
            ticker=self.ticker.strip().upper(),
            buy=self.buy.to_domain(),
            sell=self.sell.to_domain() if self.sell is not None else None,
            quantity=self.quantity,
        )


class PortfolioRequest(BaseModel):
    portfolio: list[EquitySchema] = Field(default_factory=list)

    def to_domain(self) -> Portfolio:
        return Portfolio(equities=tuple(equity.to_domain() for equity in self.portfolio))

    class Config:
        json_schema_extra = {
            "example": {
                "portfolio": [
                    {
                        "ticker": "MSFT",
                        "buy": {"date": {"year": 2023, "month": 2, "day": 1}, "price": 354.0},
                        "sell": None,
                        "quantity": 3,
                    }
                ]
            }
        }


class ErrorDetail(BaseModel):
    error: str
    message: str


class ErrorResponse(BaseModel):
    detail: ErrorDetail


__all__ = [
    "EquitySchema",
    "ErrorDetail",
    "ErrorResponse",
    "PortfolioRequest",
    "TransactionDateSchema",
    "TransactionSchema",
]
