import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from routes.dependencies import get_session
from services.trading_session import TradingSession
from exceptions.exceptions import TradeRejectedException
from util.portfolio_schema import HoldingPerformance, PortfolioSnapshot, TradeRequest, Transaction

logger = logging.getLogger("portfolio")
logger.setLevel(logging.INFO)

router = APIRouter()

@router.get("/portfolio", response_model=PortfolioSnapshot)
def get_portfolio(session: TradingSession = Depends(get_session)):
    logger.debug("Fetching portfolio snapshot")
    return session.snapshot()

@router.get("/portfolio/performance", response_model=List[HoldingPerformance])
def get_performance(session: TradingSession = Depends(get_session)):
    return session.performance()

@router.get("/portfolio/transactions", response_model=List[Transaction])
def get_transactions(session: TradingSession = Depends(get_session)):
    return session.transactions()

@router.post("/trade")
def trade(request: TradeRequest, session: TradingSession = Depends(get_session)):
    logger.debug("Trade %s %d %s", request.type, request.shares, request.symbol)
    try:
        txn = session.trade(request.type, request.symbol, request.shares)
    except TradeRejectedException as e:
        logger.warning("Trade rejected: %s", e)
        raise HTTPException(status_code=400, detail=str(e))

    if txn is None:
        # Unknown symbols are ignored rather than treated as errors
        return {"message": f"No trade: {request.symbol} is not listed", "transaction": None}

    return {
        "message": f"{request.type} {request.shares} {request.symbol} executed",
        "transaction": txn.to_record(),
        "portfolio": session.snapshot().to_record(),
    }
