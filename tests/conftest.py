import json
import os
import random
import tempfile
from datetime import datetime
from types import SimpleNamespace

# Logs and TinyDB files go to a scratch dir; must be set before backend imports
_scratch = tempfile.mkdtemp(prefix="tradesim-tests-")
os.environ.setdefault("TRADESIM_LOG_DIR", os.path.join(_scratch, "logs"))
os.environ.setdefault("TRADESIM_DB_DIR", os.path.join(_scratch, "db"))
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from config.settings import load_simulation_config
from db.state_store import StateStore
from market.market_data import MarketData
from market.price_simulator import PriceSimulator
from paper_trading.ledger import PortfolioLedger
from services.advisor_service import AdvisorService
from services.trading_session import TradingSession
from util.portfolio_schema import Stock


def make_stock(symbol="AAPL", price=185.92, name=None, change_percent=0.0):
    return Stock(
        symbol=symbol,
        name=name or f"{symbol} Corp.",
        price=price,
        change=0.0,
        change_percent=change_percent,
        market_cap="1T",
        volume="10M",
    )


class FakeCompletions:
    """Stands in for client.chat.completions; replays queued replies or raises."""

    def __init__(self):
        self.replies = []
        self.calls = []

    def queue(self, reply):
        self.replies.append(reply)

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        content = reply if isinstance(reply, str) or reply is None else json.dumps(reply)
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def sim_config():
    return load_simulation_config()


@pytest.fixture
def market():
    return MarketData([
        make_stock("AAPL", 185.92),
        make_stock("TSLA", 175.22),
        make_stock("RY.TO", 142.50),
    ])


@pytest.fixture
def ledger(market):
    return PortfolioLedger(market, 100000)


@pytest.fixture
def memory_db():
    db = TinyDB(storage=MemoryStorage)
    yield db
    db.close()


@pytest.fixture
def store(memory_db):
    return StateStore(memory_db, initial_balance=100000)


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def advisor(fake_openai):
    return AdvisorService(client=fake_openai, advice_count=3)


@pytest.fixture
def simulator(sim_config):
    fixed = datetime(2026, 10, 19, 10, 30, 0)
    return PriceSimulator(sim_config, rng=random.Random(42), clock=lambda: fixed)


@pytest.fixture
def session(store, advisor, simulator, market):
    store.save_stocks(market.all())
    return TradingSession.load(store, advisor, simulator)
