"""Configuration loading from environment variables and defaults."""

import os
from pathlib import Path

# Load .env file if it exists
try:
    from dotenv import load_dotenv
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
except ImportError:
    pass

# Rank table produced by `plo-equity build-table`
RANK_TABLE_PATH = Path(os.getenv("PLO_RANK_TABLE_PATH", "ranked_hands.csv"))

# Stopping criteria
MIN_TRIALS = int(os.getenv("PLO_MIN_TRIALS", "100"))
MAX_SIGMA = float(os.getenv("PLO_MAX_SIGMA", "0.005"))
MAX_HALF_WIDTH = float(os.getenv("PLO_MAX_HALF_WIDTH", "0.01"))

# Parallel execution
BATCH_SIZE = int(os.getenv("PLO_BATCH_SIZE", "100"))
WORKERS = int(os.getenv("PLO_WORKERS", str(os.cpu_count() or 1)))

# Logging
LOG_LEVEL = os.getenv("PLO_LOG_LEVEL", "INFO")
