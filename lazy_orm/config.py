"""Configuration for lazy_orm.

Resolution order:
1. Environment variables (highest priority)
2. TOML config file
3. Built-in defaults

The TOML file is read from ``LAZY_ORM_CONFIG`` when set, or from an explicit
``config_path``. Only the ``[database]`` and ``[logging]`` tables are used:

    [database]
    path = "data/app.sqlite"
    sync_schema = true

    [logging]
    level = "debug"
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Optional

DEFAULTS = {
    "db_path": "data/lazy_orm.sqlite",
    "sync_schema": False,
    "log_level": "info",
}

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LOGGING_CONFIGURED = False


def load_toml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from TOML file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is invalid TOML
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Runtime settings for a record store and logging."""

    def __init__(self, config_path: Optional[Path] = None):
        self._config: dict[str, Any] = {}

        if config_path is None and os.environ.get("LAZY_ORM_CONFIG"):
            config_path = Path(os.environ["LAZY_ORM_CONFIG"])
        if config_path is not None:
            self._config = load_toml_config(config_path)

        self._apply_config()

    def _apply_config(self):
        database = self._config.get("database", {})
        logging_config = self._config.get("logging", {})

        self.db_path = os.environ.get(
            "LAZY_ORM_DB_PATH",
            database.get("path", DEFAULTS["db_path"]),
        )
        self.sync_schema = _as_bool(os.environ.get(
            "LAZY_ORM_SYNC_SCHEMA",
            database.get("sync_schema", DEFAULTS["sync_schema"]),
        ))
        self.log_level = os.environ.get(
            "LAZY_ORM_LOG_LEVEL",
            logging_config.get("level", DEFAULTS["log_level"]),
        )

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure process-wide logging once, from settings."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    settings = settings or Settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    _LOGGING_CONFIGURED = True
