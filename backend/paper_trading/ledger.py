# @role: Cash balance and holdings with validated buy/sell accounting
# @used_by: trading_session.py, portfolio_router.py
# @filter_type: system
# @tags: ledger, portfolio, trading
import time
import uuid
from typing import Dict, Iterable, List, Optional

from market.market_data import MarketData
from util.portfolio_schema import Holding, HoldingPerformance, Transaction
from exceptions.exceptions import InsufficientFundsException, InsufficientSharesException
from config.logging_config import get_loggers

logger, trade_logger = get_loggers()


class PortfolioLedger:
    def __init__(self, market: MarketData, balance: float, holdings: Iterable[Holding] = ()):
        self.market = market
        self.balance = balance
        self._holdings: Dict[str, Holding] = {h.symbol: h for h in holdings}
        self.transactions: List[Transaction] = []

    @property
    def holdings(self) -> List[Holding]:
        return list(self._holdings.values())

    def holding(self, symbol: str) -> Optional[Holding]:
        return self._holdings.get(symbol)

    def buy(self, symbol: str, shares: int) -> Optional[Transaction]:
        price = self.market.price_of(symbol)
        if price is None:
            logger.warning("Buy ignored: unknown symbol %s", symbol)
            return None

        cost = shares * price
        if shares <= 0:
            raise InsufficientFundsException(f"Share count must be positive, got {shares}")
        if cost > self.balance:
            logger.info("🚫 Buy %d %s rejected: cost %.2f exceeds balance %.2f", shares, symbol, cost, self.balance)
            raise InsufficientFundsException(
                f"Insufficient balance: {shares} x {symbol} costs ${cost:,.2f}, available ${self.balance:,.2f}"
            )

        self.balance -= cost
        existing = self._holdings.get(symbol)
        if existing:
            existing.average_price = (existing.average_price * existing.shares + cost) / (existing.shares + shares)
            existing.shares += shares
        else:
            self._holdings[symbol] = Holding(symbol=symbol, shares=shares, average_price=price)

        return self._record("BUY", symbol, shares, price)

    def sell(self, symbol: str, shares: int) -> Optional[Transaction]:
        price = self.market.price_of(symbol)
        if price is None:
            logger.warning("Sell ignored: unknown symbol %s", symbol)
            return None

        existing = self._holdings.get(symbol)
        if shares <= 0:
            raise InsufficientSharesException(f"Share count must be positive, got {shares}")
        if not existing or existing.shares < shares:
            held = existing.shares if existing else 0
            logger.info("🚫 Sell %d %s rejected: only %d held", shares, symbol, held)
            raise InsufficientSharesException(f"Not enough shares: requested {shares} {symbol}, holding {held}")

        self.balance += shares * price
        existing.shares -= shares
        if existing.shares == 0:
            del self._holdings[symbol]

        return self._record("SELL", symbol, shares, price)

    def _record(self, side: str, symbol: str, shares: int, price: float) -> Transaction:
        txn = Transaction(
            id=uuid.uuid4().hex,
            type=side,
            symbol=symbol,
            shares=shares,
            price=price,
            timestamp=int(time.time() * 1000),
        )
        self.transactions.append(txn)
        trade_logger.info(
            f"{'🟢' if side == 'BUY' else '🔴'} {side} {symbol} @ ${price:.2f} x {shares} = ${shares * price:.2f} | "
            f"balance ${self.balance:.2f}"
        )
        return txn

    def total_equity(self) -> float:
        return sum(h.shares * (self.market.price_of(h.symbol) or 0) for h in self._holdings.values())

    def portfolio_value(self) -> float:
        return self.balance + self.total_equity()

    def performance_percent(self, initial_balance: float) -> float:
        if not initial_balance:
            return 0.0
        return (self.portfolio_value() - initial_balance) / initial_balance * 100

    def performance(self) -> List[HoldingPerformance]:
        """Unrealised P&L per holding; holdings whose symbol no longer resolves are skipped."""
        rows = []
        for h in self._holdings.values():
            price = self.market.price_of(h.symbol)
            if price is None:
                continue
            market_value = h.shares * price
            cost_basis = h.shares * h.average_price
            profit = market_value - cost_basis
            rows.append(HoldingPerformance(
                symbol=h.symbol,
                shares=h.shares,
                average_price=h.average_price,
                price=price,
                market_value=market_value,
                cost_basis=cost_basis,
                profit=profit,
                profit_percent=(profit / cost_basis) * 100 if cost_basis else 0.0,
            ))
        return rows
