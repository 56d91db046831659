# @role: Routes to run and read AI trade advice
# @used_by: main.py
# @filter_type: system
# @tags: router, advice, api
from typing import List

from fastapi import APIRouter, Depends

from routes.dependencies import get_session
from services.trading_session import TradingSession
from util.portfolio_schema import AIAdvice
from config.logging_config import get_loggers

logger, trade_logger = get_loggers()

router = APIRouter()

@router.post("/advice", response_model=List[AIAdvice], summary="Run a new advisory analysis")
def run_advice(session: TradingSession = Depends(get_session)):
    advice = session.run_analysis()
    logger.info("Returning %d advice items", len(advice))
    return advice

@router.get("/advice", response_model=List[AIAdvice], summary="Latest advisory result")
def latest_advice(session: TradingSession = Depends(get_session)):
    return session.advice
