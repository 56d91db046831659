# @role: Durable key-value mirror of balance, holdings and the instrument list
# @used_by: trading_session.py, main.py
# @filter_type: utility
# @tags: tinydb, persistence, state
import json
import math
from typing import Any, List, Optional

from pydantic import ValidationError
from tinydb import TinyDB, Query

from market.catalog import get_seed_stocks
from util.portfolio_schema import Holding, Stock
from config.settings import load_simulation_config
from config.logging_config import get_loggers

logger, trade_logger = get_loggers()

STORAGE_KEYS = {
    "BALANCE": "tradesim_balance",
    "HOLDINGS": "tradesim_holdings",
    "STOCKS": "tradesim_stocks",
}

Entry = Query()


class StateStore:
    """
    Three independent entries in one TinyDB table: {"key": ..., "value": ...}.

    Each value is read once at startup and overwritten on every change. Writes
    are not grouped, so a crash between them can leave the keys out of step.
    """

    def __init__(self, db: TinyDB, initial_balance: Optional[float] = None):
        self.table = db.table("state")
        if initial_balance is None:
            initial_balance = load_simulation_config()["initial_balance"]
        self.initial_balance = initial_balance

    def _get(self, key: str) -> Any:
        doc = self.table.get(Entry.key == key)
        return None if doc is None else doc.get("value")

    def _put(self, key: str, value: Any):
        self.table.upsert({"key": key, "value": value}, Entry.key == key)

    def load_balance(self) -> float:
        raw = self._get(STORAGE_KEYS["BALANCE"])
        if raw is None:
            return self.initial_balance
        try:
            balance = float(raw)
        except (TypeError, ValueError):
            balance = None
        if balance is None or not math.isfinite(balance) or balance < 0:
            logger.warning(f"⚠️ Unusable saved balance {raw!r}; starting from {self.initial_balance}")
            return self.initial_balance
        return balance

    def load_holdings(self) -> List[Holding]:
        raw = self._get(STORAGE_KEYS["HOLDINGS"])
        if raw is None:
            return []
        try:
            return [Holding.model_validate(item) for item in _decode(raw)]
        except (TypeError, ValueError, ValidationError) as e:
            logger.warning(f"⚠️ Discarding invalid saved holdings: {e}")
            return []

    def load_stocks(self) -> List[Stock]:
        raw = self._get(STORAGE_KEYS["STOCKS"])
        if raw is None:
            return get_seed_stocks()
        try:
            return [Stock.model_validate(item) for item in _decode(raw)]
        except (TypeError, ValueError, ValidationError) as e:
            logger.warning(f"⚠️ Saved instrument list invalid ({e}); using seed catalog")
            return get_seed_stocks()

    def save_balance(self, balance: float):
        self._put(STORAGE_KEYS["BALANCE"], str(balance))

    def save_holdings(self, holdings: List[Holding]):
        self._put(STORAGE_KEYS["HOLDINGS"], [h.to_record() for h in holdings])

    def save_stocks(self, stocks: List[Stock]):
        self._put(STORAGE_KEYS["STOCKS"], [s.to_record() for s in stocks])


def _decode(raw):
    # Accepts JSON-encoded strings as well as lists
    if isinstance(raw, str):
        raw = json.loads(raw)
    if not isinstance(raw, list):
        raise TypeError(f"expected a list, got {type(raw).__name__}")
    return raw
