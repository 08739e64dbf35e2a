import os
from functools import lru_cache
from pathlib import Path


class Settings:
    def __init__(
        self,
        database_url: str,
        csrf_secret: str,
        log_level: str,
        currency: str,
    ) -> None:
        self.database_url = database_url
        self.csrf_secret = csrf_secret
        self.log_level = log_level
        self.currency = currency


def _ensure_data_dir() -> Path:
    root = Path(os.getenv("FINANCE_DATA_DIR", "./data")).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    data_dir = _ensure_data_dir()
    default_db = data_dir / "finance.db"
    database_url = os.getenv("FINANCE_DATABASE_URL", f"sqlite:///{default_db}")
    csrf_secret = os.getenv(
        "FINANCE_CSRF_SECRET",
        "5d0c3e9a4f1b27c86e7a90d2b4f3c1e8a6d5b9f07c2e4a1d3b8f6e0c9a7d2b41",
    )
    log_level = os.getenv("FINANCE_LOG_LEVEL", "INFO").upper()
    currency = os.getenv("FINANCE_CURRENCY", "USD").upper()
    return Settings(
        database_url=database_url,
        csrf_secret=csrf_secret,
        log_level=log_level,
        currency=currency,
    )
