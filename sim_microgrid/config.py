from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict

DEFAULT_DB_FILENAME = "sim_microgrid.db"
DEFAULT_SNAPSHOT_NAME = "default"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _load_dotenv(path: str = ".env") -> Dict[str, str]:
    """
    Basic .env loader to populate os.environ when python-dotenv is unavailable.
    Returns a mapping of parsed key/value pairs.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}

    parsed: Dict[str, str] = {}
    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)
        parsed[key] = value
    return parsed


_load_dotenv()


def get_database_url() -> str:
    """
    Determine the SQLAlchemy database URL for snapshot storage.

    Returns:
        ``POSTGRES_DSN`` when set, otherwise a SQLite URL pointing at
        ``SIM_MICROGRID_DB_PATH`` (default ``sim_microgrid.db`` in the
        working directory).
    """
    dsn = os.getenv("POSTGRES_DSN")
    if dsn:
        return dsn

    db_path = Path(os.getenv("SIM_MICROGRID_DB_PATH", DEFAULT_DB_FILENAME)).expanduser()
    if not db_path.is_absolute():
        db_path = Path.cwd() / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{db_path}"


def get_snapshot_name() -> str:
    """Name of the persisted snapshot slot used by the host."""
    return os.getenv("SIM_MICROGRID_SNAPSHOT", DEFAULT_SNAPSHOT_NAME)


def parse_log_level(name: str) -> int:
    """Numeric level for a level name; unknown names fall back to INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_log_level() -> int:
    """Logging level from ``SIM_MICROGRID_LOG_LEVEL`` (default INFO)."""
    return parse_log_level(os.getenv("SIM_MICROGRID_LOG_LEVEL", "INFO"))


def configure_logging(level: int | None = None) -> None:
    logging.basicConfig(level=level if level is not None else get_log_level(), format=LOG_FORMAT)
