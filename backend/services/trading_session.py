# @role: Owns market, ledger, store and advisor; routes every mutation and save
# @used_by: main.py, scheduler.py, routers
# @filter_type: system
# @tags: session, trading, state
import threading
from typing import List, Optional

from market.market_data import MarketData
from market.price_simulator import PriceSimulator
from paper_trading.ledger import PortfolioLedger
from db.state_store import StateStore
from services.advisor_service import AdvisorService
from util.portfolio_schema import AIAdvice, HoldingPerformance, NewsReport, PortfolioSnapshot, Stock, Transaction
from config.logging_config import get_loggers

logger, trade_logger = get_loggers()


class TradingSession:
    """
    The single explicit state object for one simulated account.

    Ledger and market are mutated only through this class, and each mutation
    is followed by an explicit save of the keys it touched. The lock keeps the
    scheduler's tick and request handlers from interleaving.
    """

    def __init__(self, market: MarketData, ledger: PortfolioLedger, store: StateStore,
                 advisor: AdvisorService, simulator: PriceSimulator):
        self.market = market
        self.ledger = ledger
        self.store = store
        self.advisor = advisor
        self.simulator = simulator
        self.advice: List[AIAdvice] = []
        self._analysis_runs = 0
        self._lock = threading.RLock()

    @classmethod
    def load(cls, store: StateStore, advisor: AdvisorService, simulator: Optional[PriceSimulator] = None):
        market = MarketData(store.load_stocks())
        ledger = PortfolioLedger(market, store.load_balance(), store.load_holdings())
        logger.info(
            "📂 Session loaded: balance %.2f, %d holdings, %d instruments",
            ledger.balance, len(ledger.holdings), len(market)
        )
        return cls(market, ledger, store, advisor, simulator or PriceSimulator())

    @property
    def initial_balance(self) -> float:
        return self.store.initial_balance

    def trade(self, side: str, symbol: str, shares: int) -> Optional[Transaction]:
        with self._lock:
            if side == "BUY":
                txn = self.ledger.buy(symbol, shares)
            elif side == "SELL":
                txn = self.ledger.sell(symbol, shares)
            else:
                raise ValueError(f"Unknown trade side: {side}")

            if txn is None:
                return None
            self.store.save_balance(self.ledger.balance)
            self.store.save_holdings(self.ledger.holdings)
            return txn

    def tick(self):
        with self._lock:
            self.market.replace_all(self.simulator.tick(self.market.all()))
            self.store.save_stocks(self.market.all())
        logger.debug("Tick applied to %d instruments", len(self.market))

    def add_stock(self, stock: Stock) -> bool:
        with self._lock:
            added = self.market.add_stock(stock)
            if added:
                self.store.save_stocks(self.market.all())
            return added

    def stocks(self, query: Optional[str] = None) -> List[Stock]:
        with self._lock:
            found = self.market.search(query) if query else self.market.all()
            return [s.model_copy(deep=True) for s in found]

    def top_gainers(self, n: int = 3) -> List[Stock]:
        with self._lock:
            return [s.model_copy(deep=True) for s in self.market.top_gainers(n)]

    def stock(self, symbol: str) -> Stock:
        """Raises UnknownSymbolException when the symbol is not listed."""
        with self._lock:
            return self.market.require(symbol).model_copy(deep=True)

    def performance(self) -> List[HoldingPerformance]:
        with self._lock:
            return self.ledger.performance()

    def transactions(self) -> List[Transaction]:
        with self._lock:
            return [t.model_copy() for t in self.ledger.transactions]

    def global_search(self, query: str) -> Optional[Stock]:
        return self.advisor.search_global_stock(query)

    def stock_news(self, symbol: str) -> NewsReport:
        return self.advisor.get_stock_news(symbol)

    def run_analysis(self) -> List[AIAdvice]:
        with self._lock:
            self._analysis_runs += 1
            run_id = self._analysis_runs
            stocks = self.market.all()
            holdings = [h.model_copy() for h in self.ledger.holdings]
            balance = self.ledger.balance

        logger.info("🤖 Advice run #%d started", run_id)
        advice = self.advisor.get_market_analysis(stocks, holdings, balance)

        with self._lock:
            # Last completion wins, even if a newer run started meanwhile
            if run_id != self._analysis_runs:
                logger.info("Advice run #%d finished after run #%d started", run_id, self._analysis_runs)
            self.advice = advice
        return advice

    def snapshot(self) -> PortfolioSnapshot:
        with self._lock:
            return PortfolioSnapshot(
                balance=self.ledger.balance,
                holdings=[h.model_copy() for h in self.ledger.holdings],
                total_equity=self.ledger.total_equity(),
                portfolio_value=self.ledger.portfolio_value(),
                performance_percent=self.ledger.performance_percent(self.initial_balance),
                last_trade=self.ledger.transactions[-1] if self.ledger.transactions else None,
            )
