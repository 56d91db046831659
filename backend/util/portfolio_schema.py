# @role: Pydantic models for instruments, holdings, trades and AI replies
# @used_by: market_data.py, price_simulator.py, ledger.py, state_store.py, advisor_service.py, routers
# @filter_type: utility
# @tags: schema, pydantic, portfolio
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Snake-case attributes in Python, camelCase keys on the wire and in storage."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


class PricePoint(WireModel):
    time: str
    price: float


class Stock(WireModel):
    symbol: str
    name: str
    price: float = Field(gt=0)
    change: float = 0.0
    change_percent: float = 0.0
    history: List[PricePoint] = Field(default_factory=list)
    market_cap: str = ""
    volume: str = ""


class StockQuote(WireModel):
    """Shape returned by the global symbol search."""
    symbol: str = Field(min_length=1)
    name: str
    price: float = Field(gt=0)
    change: float
    change_percent: float
    market_cap: str
    volume: str

    def to_stock(self) -> Stock:
        return Stock(**self.model_dump(), history=[])


class Holding(WireModel):
    symbol: str
    shares: int = Field(gt=0)
    average_price: float


class Transaction(WireModel):
    id: str
    type: Literal["BUY", "SELL"]
    symbol: str
    shares: int
    price: float
    timestamp: int


class HoldingPerformance(WireModel):
    symbol: str
    shares: int
    average_price: float
    price: float
    market_value: float
    cost_basis: float
    profit: float
    profit_percent: float


class AIAdvice(WireModel):
    symbol: str
    action: Literal["BUY", "SELL", "HOLD"]
    reason: str
    confidence: float = Field(ge=0, le=100)
    sentiment: str


class NewsSource(WireModel):
    title: str = "Related News"
    url: str = "#"


class NewsReport(WireModel):
    summary: str
    sources: List[NewsSource] = Field(default_factory=list)


class TradeRequest(WireModel):
    type: Literal["BUY", "SELL"]
    symbol: str
    shares: int


class SearchRequest(WireModel):
    query: str = Field(min_length=1)


class PortfolioSnapshot(WireModel):
    balance: float
    holdings: List[Holding]
    total_equity: float
    portfolio_value: float
    performance_percent: float
    last_trade: Optional[Transaction] = None
