from datetime import date, time

import pytest

from conftest import make_quote
from modus.errors import EmptyDataSetError
from modus.fx import convert_to_usd, fx_pair


def test_fx_pair_uses_yahoo_currency_ticker():
    assert fx_pair("eur") == "EUR=X"
    assert fx_pair("GBP") == "GBP=X"


def test_convert_matches_rates_by_date_not_timestamp():
    quotes = [make_quote(date(2023, 3, 1), 50.0, 40.0, at=time(9, 0))]
    fx = [
        make_quote(date(2023, 2, 28), 1.05, at=time(22, 0)),
        make_quote(date(2023, 3, 1), 1.10, at=time(22, 0)),
    ]

    converted = convert_to_usd(quotes, fx)

    assert converted[0].adjclose == pytest.approx(44.0)
    assert converted[0].close == 50.0
    assert converted[0].timestamp == quotes[0].timestamp


def test_first_fx_quote_of_a_day_wins():
    quotes = [make_quote(date(2023, 3, 1), 10.0)]
    fx = [
        make_quote(date(2023, 3, 1), 2.0, at=time(1, 0)),
        make_quote(date(2023, 3, 1), 3.0, at=time(20, 0)),
    ]
    assert convert_to_usd(quotes, fx)[0].adjclose == pytest.approx(20.0)


def test_days_without_fx_use_latest_rate():
    quotes = [make_quote(date(2023, 3, 1), 10.0), make_quote(date(2023, 3, 6), 10.0)]
    fx = [make_quote(date(2023, 3, 1), 1.2), make_quote(date(2023, 3, 3), 1.3)]

    converted = convert_to_usd(quotes, fx)

    assert [q.adjclose for q in converted] == pytest.approx([12.0, 13.0])


def test_no_quotes_needs_no_rates():
    assert convert_to_usd([], []) == []


def test_missing_fx_series_is_an_error():
    with pytest.raises(EmptyDataSetError):
        convert_to_usd([make_quote(date(2023, 3, 1), 10.0)], [])
