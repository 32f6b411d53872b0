import os
from datetime import time

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def _get_time(value: str | None, default: time) -> time:
    if not value:
        return default
    hour, minute = value.strip().split(":")
    return time(int(hour), int(minute))

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

STORAGE_BACKENDS = {"memory", "file", "sql"}
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").strip().lower()
DATABASE_URL = os.getenv("DATABASE_URL", "")
DATA_DIR = os.getenv("DATA_DIR", "./data")
SEED_MEMBERS = _get_bool(os.getenv("SEED_MEMBERS"), default=True)

MAX_SLOTS_PER_DAY = int(os.getenv("MAX_SLOTS_PER_DAY", "6"))
# Start of the daily slot (8:30 AM - 9:45 AM); same-day booking closes here.
BOOKING_CUTOFF_TIME = _get_time(os.getenv("BOOKING_CUTOFF_TIME"), time(8, 30))
MAX_COMMENT_LENGTH = int(os.getenv("MAX_COMMENT_LENGTH", "500"))

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:5173"])

def validate_runtime_config() -> None:
    if STORAGE_BACKEND not in STORAGE_BACKENDS:
        raise RuntimeError(f"Unknown STORAGE_BACKEND '{STORAGE_BACKEND}'.")
    if STORAGE_BACKEND == "sql" and not DATABASE_URL:
        raise RuntimeError("DATABASE_URL must be set when STORAGE_BACKEND is 'sql'.")
    if APP_ENV.lower() == "production" and STORAGE_BACKEND == "memory":
        raise RuntimeError("STORAGE_BACKEND must not be 'memory' in production.")
