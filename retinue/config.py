import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = Path("data")

DB_URL = os.getenv("DB_URL", "sqlite:///./data/retinue.db")
DEBUG = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SEED_CATALOG = os.getenv("SEED_CATALOG", "true").lower() in {"1", "true", "yes"}


def _load_path(env_key: str, default: Path) -> Path:
    raw_value = os.getenv(env_key)
    if not raw_value or not raw_value.strip():
        return default
    return Path(raw_value.strip())


DATA_BANK_PATH = _load_path("DATA_BANK_PATH", PACKAGE_DIR / "data" / "databank.json")

if DB_URL.startswith("sqlite:///./data/"):
    DATA_DIR.mkdir(exist_ok=True)
