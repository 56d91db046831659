# @role: Loads the seed instrument catalog used when no saved market exists
# @used_by: state_store.py
# @filter_type: utility
# @tags: catalog, seed, market
import json
from pathlib import Path
import logging
from typing import List

from util.portfolio_schema import Stock

logger = logging.getLogger("catalog_loader")

CATALOG_PATH = Path(__file__).resolve().parent / "seed_stocks.json"

def get_seed_stocks(path: Path = CATALOG_PATH) -> List[Stock]:
    """
    Load the seed catalog: US tech names plus a handful of TSX listings.
    """
    if not path.exists():
        logger.warning(f"Seed catalog not found: {path}")
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            return [Stock.model_validate(item) for item in json.load(f)]
    except Exception as e:
        logger.error(f"Failed to load seed catalog from {path}: {e}")
        return []
