"""Option valuation and bet sizing.

``bs_price`` values a European option with the Black-Scholes formula, so it
inherits the model's constant-volatility assumption. ``expected`` reaches the
same value by Monte-Carlo simulation of terminal prices. ``kelly_ratio`` sizes
a bet on an option whose market price differs from its model value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
from scipy.stats import norm

from .config import get_settings


class OptionType(str, Enum):
    CALL = "call"
    PUT = "put"


@dataclass(frozen=True)
class OptionContract:
    form: OptionType
    underlying: float
    strike: float
    maturity: int
    volatility: float
    rfr: float
    market_price: float | None = None


def _d1(option: OptionContract) -> float:
    return (
        math.log(option.underlying / option.strike)
        + (option.rfr + option.volatility**2 / 2.0) * option.maturity
    ) / (option.volatility * math.sqrt(option.maturity))


def _d2(d1: float, option: OptionContract) -> float:
    return d1 - option.volatility * math.sqrt(option.maturity)


def bs_price(option: OptionContract) -> float:
    """Black-Scholes value of the option."""

    d1 = _d1(option)
    d2 = _d2(d1, option)
    discounted_strike = option.strike * math.exp(-option.rfr * option.maturity)
    if option.form is OptionType.CALL:
        return float(option.underlying * norm.cdf(d1) - discounted_strike * norm.cdf(d2))
    return float(discounted_strike * norm.cdf(-d2) - option.underlying * norm.cdf(-d1))


def kelly_ratio(option: OptionContract) -> float | None:
    """Fraction of the bankroll to stake, or ``None`` without a market price."""

    if option.market_price is None:
        return None
    p = float(norm.cdf(_d2(_d1(option), option)))
    w = (bs_price(option) / p - option.market_price) / option.market_price
    return (p * w - (1.0 - p)) / w


def expected(
    option: OptionContract,
    simulations: int | None = None,
    rng: np.random.Generator | None = None,
) -> float:
    """Monte-Carlo value: mean discounted payoff over simulated terminal prices."""

    runs = simulations or get_settings().montecarlo_simulations
    rng = rng or np.random.default_rng()
    shocks = rng.standard_normal(runs)
    terminal = option.underlying * np.exp(
        (option.rfr - option.volatility**2 / 2.0) * option.maturity
        + option.volatility * math.sqrt(option.maturity) * shocks
    )
    if option.form is OptionType.CALL:
        payoff = np.maximum(terminal - option.strike, 0.0)
    else:
        payoff = np.maximum(option.strike - terminal, 0.0)
    discount = (1.0 + option.rfr) ** option.maturity
    return float(np.mean(payoff / discount))


__all__ = ["OptionContract", "OptionType", "bs_price", "expected", "kelly_ratio"]
