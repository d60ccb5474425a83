"""Schemas for option valuation endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from modus.options import OptionContract, OptionType


class OptionRequest(BaseModel):
    form: OptionType
    underlying: float = Field(..., gt=0)
    strike: float = Field(..., gt=0)
    maturity: int = Field(..., gt=0, description="Years to expiry")
    volatility: float = Field(..., gt=0)
    rfr: float = Field(..., description="Risk-free rate")
    market_price: float | None = Field(default=None, gt=0)

    def to_domain(self) -> OptionContract:
        return OptionContract(
            form=self.form,
            underlying=self.underlying,
            strike=self.strike,
            maturity=self.maturity,
            volatility=self.volatility,
            rfr=self.rfr,
            market_price=self.market_price,
        )


class OptionPriceResponse(BaseModel):
    price: float


class KellyResponse(BaseModel):
    kelly_fraction: float


class MonteCarloValueResponse(BaseModel):
    value: float
    simulations: int


__all__ = [
    "KellyResponse",
    "MonteCarloValueResponse",
    "OptionPriceResponse",
    "OptionRequest",
]
