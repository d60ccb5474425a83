"""Option valuation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.schemas import KellyResponse, MonteCarloValueResponse, OptionPriceResponse, OptionRequest
from modus.config import get_settings
from modus.options import bs_price, expected, kelly_ratio

router = APIRouter()


@router.post("/bs", response_model=OptionPriceResponse)
async def post_bs(request: OptionRequest) -> OptionPriceResponse:
    """Black-Scholes value of the option."""

    return OptionPriceResponse(price=bs_price(request.to_domain()))


@router.post("/kelly", response_model=KellyResponse)
async def post_kelly(request: OptionRequest) -> KellyResponse:
    fraction = kelly_ratio(request.to_domain())
    if fraction is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="market_price is required to compute the Kelly fraction.",
        )
    return KellyResponse(kelly_fraction=fraction)


@router.post("/mc", response_model=MonteCarloValueResponse)
async def post_montecarlo(request: OptionRequest) -> MonteCarloValueResponse:
    """Monte-Carlo value of the option."""

    simulations = get_settings().montecarlo_simulations
    value = expected(request.to_domain(), simulations=simulations)
    return MonteCarloValueResponse(value=value, simulations=simulations)


__all__ = ["post_bs", "post_kelly", "post_montecarlo"]
