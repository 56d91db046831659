# @role: Loads the simulation settings (balance, tick cadence, volatility classes)
# @used_by: price_simulator.py, state_store.py, trading_session.py, scheduler.py
# @filter_type: utility
# @tags: config, simulation, bootstrap
import json
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent / "simulation_config.json"

REQUIRED_KEYS = [
    "initial_balance", "tick_interval_seconds", "history_capacity",
    "advice_count", "default_market", "market_classes"
]

def load_simulation_config(path: Path = CONFIG_PATH):
    if not path.exists():
        raise FileNotFoundError(f"Missing simulation_config.json at {path}")

    with open(path, "r") as f:
        config = json.load(f)

    missing_keys = [k for k in REQUIRED_KEYS if k not in config]
    if missing_keys:
        raise KeyError(f"simulation_config.json is missing required keys: {missing_keys}")

    return config
