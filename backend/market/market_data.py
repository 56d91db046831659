# @role: In-memory market: current quote and rolling history per instrument
# @used_by: ledger.py, trading_session.py, market_router.py
# @filter_type: system
# @tags: market, quotes, instruments
from typing import Dict, Iterable, List, Optional

from util.portfolio_schema import Stock
from exceptions.exceptions import UnknownSymbolException
from config.logging_config import get_loggers

logger, trade_logger = get_loggers()


class MarketData:
    """
    Holds the instrument set keyed by symbol, in insertion order.

    Prices are only changed through replace_all(), which the price simulator
    drives once per tick. New symbols come in through add_stock().
    """

    def __init__(self, stocks: Iterable[Stock] = ()):
        self._stocks: Dict[str, Stock] = {}
        for stock in stocks:
            self.add_stock(stock)

    def __len__(self):
        return len(self._stocks)

    def all(self) -> List[Stock]:
        return list(self._stocks.values())

    def get(self, symbol: str) -> Optional[Stock]:
        return self._stocks.get(symbol)

    def require(self, symbol: str) -> Stock:
        stock = self._stocks.get(symbol)
        if stock is None:
            raise UnknownSymbolException(f"Unknown symbol {symbol}")
        return stock

    def price_of(self, symbol: str) -> Optional[float]:
        stock = self._stocks.get(symbol)
        return stock.price if stock else None

    def add_stock(self, stock: Stock) -> bool:
        if stock.symbol in self._stocks:
            logger.debug("Stock %s already listed; ignoring add", stock.symbol)
            return False
        self._stocks[stock.symbol] = stock
        logger.info("➕ Listed %s (%s) at %.2f", stock.symbol, stock.name, stock.price)
        return True

    def replace_all(self, stocks: Iterable[Stock]):
        self._stocks = {s.symbol: s for s in stocks}

    def search(self, query: str) -> List[Stock]:
        needle = (query or "").strip().lower()
        if not needle:
            return self.all()
        return [
            s for s in self._stocks.values()
            if needle in s.symbol.lower() or needle in s.name.lower()
        ]

    def top_gainers(self, n: int = 3) -> List[Stock]:
        return sorted(self._stocks.values(), key=lambda s: s.change_percent, reverse=True)[:n]
