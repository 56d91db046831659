import pytest

from exceptions.exceptions import InsufficientFundsException, InsufficientSharesException, UnknownSymbolException
from services.trading_session import TradingSession
from util.portfolio_schema import PricePoint

from conftest import make_stock


def test_load_seeds_from_store(session):
    assert session.ledger.balance == 100000
    assert [s.symbol for s in session.market.all()] == ["AAPL", "TSLA", "RY.TO"]
    assert session.ledger.market is session.market


def test_buy_then_sell_scenario_persists_each_step(session, store):
    session.trade("BUY", "AAPL", 10)

    assert store.load_balance() == pytest.approx(98140.80)
    [holding] = store.load_holdings()
    assert (holding.symbol, holding.shares) == ("AAPL", 10)
    assert holding.average_price == pytest.approx(185.92)

    session.trade("SELL", "AAPL", 10)

    assert store.load_balance() == 100000
    assert store.load_holdings() == []


def test_rejected_trade_saves_nothing(session, store):
    with pytest.raises(InsufficientFundsException):
        session.trade("BUY", "AAPL", 10_000)
    with pytest.raises(InsufficientSharesException):
        session.trade("SELL", "TSLA", 1)

    assert store.load_balance() == 100000
    assert session.ledger.holdings == []


def test_unknown_symbol_trade_is_ignored(session):
    assert session.trade("BUY", "NOPE", 1) is None
    assert session.ledger.balance == 100000


def test_unknown_side_raises(session):
    with pytest.raises(ValueError):
        session.trade("SHORT", "AAPL", 1)


def test_tick_updates_market_and_saves_instruments(session, store):
    before = {s.symbol: s.price for s in session.market.all()}

    session.tick()

    after = {s.symbol: s.price for s in session.market.all()}
    assert after.keys() == before.keys()
    assert after != before
    saved = {s.symbol: s for s in store.load_stocks()}
    assert saved["AAPL"].price == pytest.approx(after["AAPL"])
    assert len(saved["AAPL"].history) == 1


def test_equity_follows_ticks(session):
    session.trade("BUY", "AAPL", 10)
    session.tick()

    price = session.market.price_of("AAPL")
    assert session.ledger.total_equity() == pytest.approx(10 * price)


def test_add_stock_saves_only_when_inserted(session, store):
    assert session.add_stock(make_stock("SHOP.TO", 105.40)) is True
    assert "SHOP.TO" in {s.symbol for s in store.load_stocks()}

    store.save_stocks([])
    assert session.add_stock(make_stock("SHOP.TO", 1.0)) is False
    assert store.load_stocks() == []


def test_run_analysis_replaces_advice_wholesale(session, fake_openai):
    fake_openai.completions.queue({"advice": [
        {"symbol": "AAPL", "action": "BUY", "reason": "a", "confidence": 70, "sentiment": "Bullish"},
        {"symbol": "TSLA", "action": "SELL", "reason": "b", "confidence": 60, "sentiment": "Bearish"},
    ]})
    fake_openai.completions.queue(RuntimeError("service down"))

    assert len(session.run_analysis()) == 2
    assert len(session.advice) == 2

    assert session.run_analysis() == []
    assert session.advice == []


def test_run_analysis_sends_current_snapshot(session, fake_openai):
    session.trade("BUY", "TSLA", 2)
    fake_openai.completions.queue({"advice": []})

    session.run_analysis()

    prompt = fake_openai.completions.calls[0]["messages"][1]["content"]
    assert "2 shares of TSLA" in prompt
    assert "RY.TO" in prompt


def test_snapshot_reports_value_and_last_trade(session):
    session.trade("BUY", "AAPL", 10)

    snap = session.snapshot()

    assert snap.balance == pytest.approx(98140.80)
    assert snap.total_equity == pytest.approx(1859.20)
    assert snap.portfolio_value == pytest.approx(100000)
    assert snap.performance_percent == pytest.approx(0.0, abs=1e-9)
    assert snap.last_trade.symbol == "AAPL"


def test_reload_after_restart_restores_state(session, store, advisor, simulator):
    session.trade("BUY", "RY.TO", 3)
    session.tick()

    reloaded = TradingSession.load(store, advisor, simulator)

    assert reloaded.ledger.balance == pytest.approx(session.ledger.balance)
    assert reloaded.ledger.holding("RY.TO").shares == 3
    assert reloaded.market.price_of("RY.TO") == pytest.approx(session.market.price_of("RY.TO"))


def test_read_accessors_return_copies(session):
    session.trade("BUY", "AAPL", 2)

    listed = session.stocks()
    listed[0].price = 1.0
    session.transactions().clear()
    session.stock("AAPL").history.append(PricePoint(time="t", price=1.0))

    assert session.market.price_of("AAPL") == pytest.approx(185.92)
    assert session.market.get("AAPL").history == []
    assert len(session.transactions()) == 1


def test_read_accessors_filter_and_rank(session):
    session.add_stock(make_stock("NVDA", 900.0, change_percent=4.2))

    assert [s.symbol for s in session.stocks("ry")] == ["RY.TO"]
    assert [s.symbol for s in session.top_gainers(1)] == ["NVDA"]
    with pytest.raises(UnknownSymbolException):
        session.stock("NOPE")


def test_performance_accessor_reports_open_positions(session):
    session.trade("BUY", "TSLA", 2)
    [row] = session.performance()
    assert (row.symbol, row.shares) == ("TSLA", 2)
