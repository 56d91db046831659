# @role: FastAPI app entrypoint with route mounting and startup hooks
# @used_by: NA
# @filter_type: utility
# @tags: main, entrypoint, fastapi
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from routes.market_router import router as market_router
from routes.portfolio_router import router as portfolio_router
from routes.advisor_router import router as advisor_router
from schedulers.scheduler import build_scheduler, start, shutdown
from services.trading_session import TradingSession
from services.advisor_service import AdvisorService
from db.state_store import StateStore
from db.tinydb.client import get_table
from config.env_setup import env
from config.logging_config import get_loggers

# Set up logging first
logger, trade_logger = get_loggers()

def create_app(session: Optional[TradingSession] = None) -> FastAPI:
    app = FastAPI(title="Trade Simulator", version="1.0")
    app.state.session = session
    app.state.scheduler = None

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[env.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(market_router, prefix="/api")
    app.include_router(portfolio_router, prefix="/api")
    app.include_router(advisor_router, prefix="/api")

    # Scheduler hooks
    @app.on_event("startup")
    def start_price_simulation():
        if app.state.session is None:
            store = StateStore(get_table("state"))
            app.state.session = TradingSession.load(store, AdvisorService())
        logger.info("🔁 Starting price tick scheduler...")
        app.state.scheduler = build_scheduler(app.state.session)
        start(app.state.scheduler)

    @app.on_event("shutdown")
    def on_shutdown():
        logger.info("🛑 Shutting down price tick scheduler...")
        if app.state.scheduler is not None:
            shutdown(app.state.scheduler)

    return app

app = create_app()
