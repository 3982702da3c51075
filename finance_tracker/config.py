"""Configuration management for the finance tracker.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))

# Database
DB_PATH = Path(
    os.getenv("FINTRACK_DB_PATH", DATA_DIR / "finance.db")
).resolve()

# Owner id used by the Streamlit app when no sign-in provider is wired up
DEFAULT_OWNER = os.getenv("FINTRACK_OWNER", "local-user")

LOG_LEVEL = os.getenv("FINTRACK_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Single-currency app; every amount is UGX
CURRENCY_LABEL = "UGX"

DEFAULT_CATEGORY = "Uncategorized"
SAVINGS_CATEGORY = "Savings"
INCOME_CATEGORY = "Income"

EXPENSE_CATEGORIES = [
    "Food",
    "Utilities",
    "Transport",
    "Entertainment",
    "Housing",
    "Shopping",
    "Health",
    "Education",
    "Other",
]

DEFAULT_WARNING_THRESHOLD = 80.0
DAYS_PER_MONTH = 30.44
MAX_COMPARISON_ROWS = 8
RECENT_TRANSACTIONS_LIMIT = 5


def ensure_data_directories() -> None:
    """Create the data directory if it doesn't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the app and scripts."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
