"""Project-level configuration, defaults and path helpers."""

from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "afisha.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

# Catalog
DEFAULT_CATALOG_API_ROOT = "https://afisha.yandex.ru/api/"
DEFAULT_CATALOG_SITE_ROOT = "https://afisha.yandex.ru/"
DEFAULT_CATALOG_PAGE_SIZE = 12
DEFAULT_CATALOG_TIMEOUT = 10.0

# Dispatcher
DEFAULT_DISPATCH_INTERVAL_SECONDS = 60.0
BATCH_SIZE = 10

# Transport
TELEGRAM_API_ROOT = "https://api.telegram.org"


PathLike = Union[str, Path]


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def env_int(value: str | None, default: int) -> int:
    """Parse an integer environment value, falling back to default."""
    if value is None or value.strip() == "":
        return default
    return int(value)


def env_float(value: str | None, default: float) -> float:
    """Parse a float environment value, falling back to default."""
    if value is None or value.strip() == "":
        return default
    return float(value)
