# @role: Environment loader for backend settings
# @used_by: advisor_service.py, client.py, logging_config.py, price_simulator.py

# @filter_type: utility
# @tags: env, config, bootstrap
# config/env_setup.py

import os
from pathlib import Path
from dotenv import load_dotenv

# ─── Determine project root & ENV ────────────────────────────────────────────
ROOT = Path(__file__).resolve().parent.parent
ENV  = os.getenv("ENV", "development").lower()

# ─── Load the right .env file (optional: plain env vars work too) ────────────
env_path = ROOT / f".env.{ENV}"
if env_path.exists():
    load_dotenv(env_path)

# ─── Expose your environment settings ────────────────────────────────────────
class EnvConfig:
    ENV              = ENV
    OPENAI_API_KEY   = os.getenv("OPENAI_API_KEY")
    ADVISOR_MODEL    = os.getenv("ADVISOR_MODEL", "gpt-4o-mini")
    SEARCH_MODEL     = os.getenv("SEARCH_MODEL", "gpt-4o")
    NEWS_MODEL       = os.getenv("NEWS_MODEL", "gpt-4o-mini")
    TRADESIM_DB_DIR  = os.getenv("TRADESIM_DB_DIR")
    TRADESIM_LOG_DIR = os.getenv("TRADESIM_LOG_DIR")
    MARKET_TIMEZONE  = os.getenv("MARKET_TIMEZONE", "America/Toronto")
    FRONTEND_URL     = os.getenv("FRONTEND_URL", "*")

env = EnvConfig()
