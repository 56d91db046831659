import random
from datetime import datetime

import pytest

from market.price_simulator import PriceSimulator

from conftest import make_stock


def test_volatility_depends_on_market_suffix(simulator):
    assert simulator.volatility_for("RY.TO") == pytest.approx(0.0015)
    assert simulator.volatility_for("AAPL") == pytest.approx(0.0025)
    assert simulator.exchange_for("SHOP.TO") == "TSX"
    assert simulator.exchange_for("NVDA") == "NASDAQ"


def test_tick_stays_within_volatility_band(simulator):
    stocks = [make_stock("AAPL", 185.92), make_stock("RY.TO", 142.50), make_stock("TSLA", 175.22)]

    for _ in range(200):
        ticked = simulator.tick(stocks)
        for old, new in zip(stocks, ticked):
            bound = simulator.volatility_for(old.symbol)
            assert abs(new.price / old.price - 1) <= bound + 1e-12
        stocks = ticked


def test_tick_recomputes_change_against_pre_tick_price(simulator):
    stock = make_stock("AAPL", 100.0)

    [ticked] = simulator.tick([stock])

    assert ticked.change == pytest.approx(ticked.price - 100.0)
    assert ticked.change_percent == pytest.approx((ticked.price - 100.0) / 100.0 * 100)
    assert ticked.symbol == "AAPL"
    assert ticked.market_cap == stock.market_cap


def test_tick_does_not_mutate_input(simulator):
    stock = make_stock("AAPL", 100.0)
    simulator.tick([stock])
    assert stock.price == 100.0
    assert stock.history == []


def test_history_is_capped_at_twenty_samples(simulator):
    stocks = [make_stock("AAPL", 185.92)]
    for i in range(45):
        stocks = simulator.tick(stocks)
        assert len(stocks[0].history) == min(i + 1, 20)

    assert stocks[0].history[-1].price == pytest.approx(stocks[0].price)
    assert stocks[0].history[-1].time == "2026-10-19T10:30:00"


def test_history_drops_oldest_first(sim_config):
    times = iter(datetime(2026, 1, 1, 0, 0, s) for s in range(30))
    simulator = PriceSimulator(sim_config, rng=random.Random(1), clock=lambda: next(times))

    stocks = [make_stock("AAPL", 50.0)]
    for _ in range(25):
        stocks = simulator.tick(stocks)

    history = stocks[0].history
    assert history[0].time == "2026-01-01T00:00:05"
    assert history[-1].time == "2026-01-01T00:00:24"


def test_instruments_move_independently(sim_config):
    simulator = PriceSimulator(sim_config, rng=random.Random(3))
    a, b = simulator.tick([make_stock("AAPL", 100.0), make_stock("MSFT", 100.0)])
    assert a.price != b.price
