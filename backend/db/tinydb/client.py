# @role: Opens (and caches) the TinyDB files backing simulator state
# @used_by: main.py
# @filter_type: utility
# @tags: tinydb, db, client
from pathlib import Path
from tinydb import TinyDB

from config.env_setup import env
from config.logging_config import get_loggers

logger, trade_logger = get_loggers()

_open_dbs = {}

def get_db_dir() -> Path:
    """TRADESIM_DB_DIR when set, else db/tinydb/tables next to this module."""
    db_dir = Path(env.TRADESIM_DB_DIR) if env.TRADESIM_DB_DIR else Path(__file__).resolve().parent / "tables"
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir

def get_table(name: str) -> TinyDB:
    """One file per environment: {db_dir}/{name}_{ENV}.json."""
    path = get_db_dir() / f"{name}_{env.ENV}.json"
    if path in _open_dbs:
        return _open_dbs[path]

    try:
        db = TinyDB(str(path))
    except Exception:
        logger.exception(f"❌ Failed to open TinyDB file: {path}")
        raise
    _open_dbs[path] = db
    logger.info(f"✅ Opened TinyDB file: {path}")
    return db
