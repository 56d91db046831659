# @role: Builds the agent and trade file loggers shared by every module
# @used_by: ledger.py, market_data.py, state_store.py, advisor_service.py, trading_session.py, scheduler.py, main.py
# @filter_type: utility
# @tags: logging, bootstrap
import logging
from pathlib import Path
from datetime import datetime
from pytz import timezone
from config.env_setup import env

market_tz = timezone(env.MARKET_TIMEZONE)
LOG_FORMAT = '%(asctime)s — %(levelname)s — %(name)s — %(message)s'

_loggers = None

def _log_root() -> Path:
    if env.TRADESIM_LOG_DIR:
        return Path(env.TRADESIM_LOG_DIR)
    return Path(__file__).resolve().parents[1] / "logs"

def _file_logger(name: str, path: Path) -> logging.Logger:
    log = logging.getLogger(name)
    if not log.handlers:
        log.setLevel(logging.INFO)
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    return log

def get_loggers():
    """
    Returns (agent_logger, trade_logger). The first call opens a per-run
    directory {log_root}/{YYYYmmdd_HHMMSS}/ holding agent.log and trade_logs.log.
    """
    global _loggers
    if _loggers:
        return _loggers

    run_dir = _log_root() / datetime.now(market_tz).strftime("%Y%m%d_%H%M%S")
    run_dir.mkdir(parents=True, exist_ok=True)

    _loggers = (
        _file_logger("agent", run_dir / "agent.log"),
        _file_logger("trade", run_dir / "trade_logs.log"),
    )
    return _loggers
