# @role: Random-walk price ticks for every listed instrument
# @used_by: trading_session.py, scheduler.py
# @filter_type: system
# @tags: simulation, tick, volatility
import random
from datetime import datetime
from typing import Callable, List, Optional

from pytz import timezone

from config.env_setup import env
from config.settings import load_simulation_config
from util.portfolio_schema import PricePoint, Stock

market_tz = timezone(env.MARKET_TIMEZONE)


class PriceSimulator:
    def __init__(self, config: Optional[dict] = None, rng: Optional[random.Random] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        config = config or load_simulation_config()
        self.default_market = config["default_market"]
        # Longest matching suffix wins
        self.market_classes = sorted(config["market_classes"], key=lambda c: len(c["suffix"]), reverse=True)
        self.history_capacity = config["history_capacity"]
        self.rng = rng or random.Random()
        self.clock = clock or (lambda: datetime.now(market_tz))

    def _market_for(self, symbol: str) -> dict:
        for market in self.market_classes:
            if symbol.endswith(market["suffix"]):
                return market
        return self.default_market

    def volatility_for(self, symbol: str) -> float:
        return self._market_for(symbol)["volatility"]

    def exchange_for(self, symbol: str) -> str:
        return self._market_for(symbol)["exchange"]

    def step(self, stock: Stock, now: datetime) -> Stock:
        """Move one instrument by a uniform fluctuation within its volatility band."""
        volatility = self.volatility_for(stock.symbol)
        fluctuation = self.rng.uniform(-volatility, volatility)
        new_price = stock.price * (1 + fluctuation)
        change = new_price - stock.price
        change_percent = (change / stock.price) * 100 if stock.price else 0.0

        sample = PricePoint(time=now.isoformat(timespec="seconds"), price=new_price)
        history = (stock.history + [sample])[-self.history_capacity:]

        return stock.model_copy(update={
            "price": new_price,
            "change": change,
            "change_percent": change_percent,
            "history": history,
        })

    def tick(self, stocks: List[Stock]) -> List[Stock]:
        now = self.clock()
        return [self.step(stock, now) for stock in stocks]
