"""
Configuration constants for the Golf League Foursome Scheduler.
All configurable settings are defined here.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Group Rules
GROUP_SIZE = 4  # A foursome; every group holds 1-4 players
MIN_PLAYERS_FOR_FULL_GROUP = GROUP_SIZE

# Time Slots
EARLY_SLOT = "early"
LATE_SLOT = "late"

# Generation Defaults
BALANCE_TIME_SLOTS = _env_bool("BALANCE_TIME_SLOTS", True)
OPTIMIZE_PAIRINGS = _env_bool("OPTIMIZE_PAIRINGS", True)

# Pairing Optimization
# "auto" enumerates every 4-combination up to MAX_EXHAUSTIVE_POOL_SIZE players
# and hands larger pools to the CP-SAT solver.
OPTIMIZATION_STRATEGY = os.getenv("OPTIMIZATION_STRATEGY", "auto")
OPTIMIZATION_STRATEGIES = ["auto", "exhaustive", "cp_sat", "greedy"]
MAX_EXHAUSTIVE_POOL_SIZE = int(os.getenv("MAX_EXHAUSTIVE_POOL_SIZE", "24"))  # C(24,4) = 10626
CP_SAT_TIME_LIMIT_SECONDS = float(os.getenv("CP_SAT_TIME_LIMIT_SECONDS", "10.0"))
CP_SAT_WORKERS = int(os.getenv("CP_SAT_WORKERS", "1"))  # 1 worker keeps results reproducible

# Availability Coverage Thresholds (percent of roster with availability data)
LOW_COVERAGE_PERCENT = 50
FULL_COVERAGE_PERCENT = 100

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Supabase Configuration (pairing history storage)
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
PAIRING_HISTORY_TABLE = os.getenv("PAIRING_HISTORY_TABLE", "pairing_history")
