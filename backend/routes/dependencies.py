# @role: FastAPI dependency resolving the session attached to the app
# @used_by: market_router.py, portfolio_router.py, advisor_router.py
# @filter_type: utility
# @tags: router, dependency, session
from fastapi import Request

from services.trading_session import TradingSession

def get_session(request: Request) -> TradingSession:
    return request.app.state.session
