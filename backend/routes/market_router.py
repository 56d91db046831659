# @role: Routes for the instrument list, symbol lookup, news and global search
# @used_by: main.py
# @filter_type: system
# @tags: router, market, api
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from routes.dependencies import get_session
from services.trading_session import TradingSession
from util.portfolio_schema import NewsReport, SearchRequest, Stock
from exceptions.exceptions import UnknownSymbolException

logger = logging.getLogger("market")
logger.setLevel(logging.INFO)

router = APIRouter()

@router.get("/stocks", response_model=List[Stock])
def list_stocks(
    q: Optional[str] = Query(None, description="Filter by symbol or name"),
    session: TradingSession = Depends(get_session)
):
    stocks = session.stocks(q)
    logger.debug("Returning %d stocks for filter %r", len(stocks), q)
    return stocks

@router.get("/stocks/top-gainers", response_model=List[Stock])
def top_gainers(
    limit: int = Query(3, ge=1, le=50),
    session: TradingSession = Depends(get_session)
):
    return session.top_gainers(limit)

@router.post("/stocks/global-search", response_model=Stock)
def global_search(request: SearchRequest, session: TradingSession = Depends(get_session)):
    result = session.global_search(request.query)
    if result is None:
        raise HTTPException(status_code=404, detail=f"No instrument found for '{request.query}'")
    return result

@router.post("/stocks")
def add_stock(stock: Stock, session: TradingSession = Depends(get_session)):
    added = session.add_stock(stock)
    if added:
        logger.info("Stock %s added to market", stock.symbol)
        return {"message": f"{stock.symbol} added", "added": True}
    return {"message": f"{stock.symbol} already listed", "added": False}

@router.get("/stocks/{symbol}", response_model=Stock)
def get_stock(symbol: str, session: TradingSession = Depends(get_session)):
    try:
        return session.stock(symbol)
    except UnknownSymbolException as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.get("/stocks/{symbol}/exchange")
def get_exchange(symbol: str, session: TradingSession = Depends(get_session)):
    try:
        stock = session.stock(symbol)
    except UnknownSymbolException as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"symbol": stock.symbol, "exchange": session.simulator.exchange_for(stock.symbol)}

@router.get("/stocks/{symbol}/news", response_model=NewsReport)
def get_news(symbol: str, session: TradingSession = Depends(get_session)):
    return session.stock_news(symbol)
