"""Unit tests for the price oracle clients"""

import httpx
import pytest
from decimal import Decimal
from unittest.mock import patch
from casino_ledger.infrastructure.clients.prices import INSTRUMENTS, HttpPriceOracle, SimulatedPriceOracle
from casino_ledger.domain.exceptions import TransientError


def test_simulated_oracle_quotes_every_instrument_within_volatility():
    oracle = SimulatedPriceOracle(volatility=0.05)

    prices = oracle.get_prices()

    assert set(prices) == set(INSTRUMENTS)
    for symbol, quote in prices.items():
        base = INSTRUMENTS[symbol][1]
        assert base * Decimal("0.95") - Decimal("0.01") <= quote.price <= base * Decimal("1.05") + Decimal("0.01")
        assert abs(quote.change_percent) <= Decimal("5.00")
        assert quote.price == quote.price.quantize(Decimal("0.01"))


def test_seeded_oracle_is_a_pure_function_of_seed_and_time():
    first = SimulatedPriceOracle(seed=42, clock=lambda: 1000.0)
    second = SimulatedPriceOracle(seed=42, clock=lambda: 1000.4)

    assert first.get_prices() == second.get_prices()


def test_seeded_oracle_moves_between_ticks():
    now = [1000.0]
    oracle = SimulatedPriceOracle(seed=7, clock=lambda: now[0])

    before = oracle.get_prices()
    now[0] = 2000.0
    after = oracle.get_prices()

    assert any(before[s].price != after[s].price for s in INSTRUMENTS)


def test_zero_volatility_returns_base_prices():
    prices = SimulatedPriceOracle(volatility=0.0).get_prices()

    assert prices["TECH"].price == Decimal("150.00")
    assert prices["CRYPTO"].price == Decimal("55.00")


def _mock_transport(handler):
    real_client = httpx.Client

    def factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    return patch("casino_ledger.infrastructure.clients.prices.httpx.Client", side_effect=factory)


def test_http_oracle_parses_feed():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/prices"
        return httpx.Response(200, json={"TECH": {"name": "TechCorp", "price": 151.237, "changePercent": 0.82}})

    with _mock_transport(handler):
        prices = HttpPriceOracle("http://feed.test").get_prices()

    assert prices["TECH"].price == Decimal("151.24")
    assert prices["TECH"].change_percent == Decimal("0.82")


def test_http_oracle_server_error_is_transient():
    with _mock_transport(lambda request: httpx.Response(502)):
        with pytest.raises(TransientError):
            HttpPriceOracle("http://feed.test").get_prices()


def test_http_oracle_malformed_payload_is_transient():
    with _mock_transport(lambda request: httpx.Response(200, json={"TECH": {"name": "TechCorp"}})):
        with pytest.raises(TransientError):
            HttpPriceOracle("http://feed.test").get_prices()


@pytest.mark.parametrize("price", [-50, 0, 0.004])
def test_http_oracle_non_positive_price_is_transient(price):
    with _mock_transport(lambda request: httpx.Response(200, json={"TECH": {"name": "TechCorp", "price": price}})):
        with pytest.raises(TransientError):
            HttpPriceOracle("http://feed.test").get_prices()


@pytest.mark.parametrize("body", [b'{"TECH": {"price": NaN}}', b'{"TECH": {"price": Infinity}}'])
def test_http_oracle_non_finite_price_is_transient(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"Content-Type": "application/json"})

    with _mock_transport(handler):
        with pytest.raises(TransientError):
            HttpPriceOracle("http://feed.test").get_prices()
