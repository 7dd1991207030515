"""Runtime settings, read from the environment (and an optional .env file)."""
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import InitializationError

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_ALLOCATION = 100  # the allocation input allows up to 200; the validator has always said 100


@dataclass(frozen=True)
class Settings:
    database_url: str
    people_page_size: int = DEFAULT_PAGE_SIZE
    log_level: str = "INFO"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InitializationError(f"{name} must be an integer, got {raw!r}")


def max_allocation() -> int:
    """Upper bound accepted for a hospital allocation, read when each input is validated."""
    return _int_env("STAFFING_MAX_ALLOCATION", DEFAULT_MAX_ALLOCATION)


def load_settings() -> Settings:
    """Build Settings from the environment. Raises InitializationError if the store URL is missing."""
    url = os.environ.get("STAFFING_DATABASE_URL", "").strip()
    if not url:
        raise InitializationError("STAFFING_DATABASE_URL is not set. Check your .env file.")
    page_size = _int_env("STAFFING_PEOPLE_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    if page_size < 1:
        raise InitializationError("STAFFING_PEOPLE_PAGE_SIZE must be at least 1")
    return Settings(
        database_url=url,
        people_page_size=page_size,
        log_level=os.environ.get("STAFFING_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
