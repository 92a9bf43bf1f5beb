import os
from pathlib import Path

from .constants import DATA_DIR, DB_FILE_NAME, DEFAULT_DB_TIMEOUT_SECONDS, LOG_DIR_NAME

BASE_DIR = Path(__file__).resolve().parent
DATA_PATH = BASE_DIR / DATA_DIR
LOG_DIR = Path(os.environ.get("RETAIL_LEDGER_LOG_DIR", LOG_DIR_NAME))

# RETAIL_LEDGER_DB_PATH wins over the bundled data dir
DB_PATH = Path(os.environ.get("RETAIL_LEDGER_DB_PATH", DATA_PATH / DB_FILE_NAME))

try:
    DB_TIMEOUT_SECONDS = float(os.environ.get("RETAIL_LEDGER_DB_TIMEOUT", DEFAULT_DB_TIMEOUT_SECONDS))
except ValueError:
    DB_TIMEOUT_SECONDS = DEFAULT_DB_TIMEOUT_SECONDS

LOG_LEVEL = os.environ.get("RETAIL_LEDGER_LOG_LEVEL", "INFO").upper()
if LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
    LOG_LEVEL = "INFO"
