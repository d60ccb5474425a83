import math

import numpy as np
import pytest
from scipy.stats import norm

from modus.options import OptionContract, OptionType, bs_price, expected, kelly_ratio


def _contract(form: OptionType = OptionType.CALL, **overrides) -> OptionContract:
    fields = dict(form=form, underlying=100.0, strike=95.0, maturity=1, volatility=0.2, rfr=0.05)
    fields.update(overrides)
    return OptionContract(**fields)


def test_black_scholes_reference_value():
    # S=100, K=100, T=1, sigma=0.2, r=0.05
    assert bs_price(_contract(strike=100.0)) == pytest.approx(10.4506, abs=1e-4)


def test_put_call_parity():
    call = bs_price(_contract(OptionType.CALL))
    put = bs_price(_contract(OptionType.PUT))
    assert call - put == pytest.approx(100.0 - 95.0 * math.exp(-0.05))


def test_kelly_requires_market_price():
    assert kelly_ratio(_contract()) is None


def test_kelly_fraction_from_model_edge():
    option = _contract(market_price=8.0)
    d1 = (math.log(100.0 / 95.0) + (0.05 + 0.02)) / 0.2
    p = norm.cdf(d1 - 0.2)
    w = (bs_price(option) / p - 8.0) / 8.0

    assert kelly_ratio(option) == pytest.approx((p * w - (1.0 - p)) / w)


def test_overpriced_option_gets_smaller_stake():
    cheap = kelly_ratio(_contract(market_price=5.0))
    dear = kelly_ratio(_contract(market_price=20.0))
    assert cheap > dear


@pytest.mark.parametrize("form", [OptionType.CALL, OptionType.PUT])
def test_monte_carlo_converges_to_black_scholes(form):
    option = _contract(form, rfr=0.0)
    value = expected(option, simulations=200_000, rng=np.random.default_rng(7))
    assert value == pytest.approx(bs_price(option), rel=0.02)


def test_monte_carlo_is_reproducible_with_seeded_generator():
    option = _contract()
    first = expected(option, simulations=1_000, rng=np.random.default_rng(1))
    second = expected(option, simulations=1_000, rng=np.random.default_rng(1))
    assert first == second
