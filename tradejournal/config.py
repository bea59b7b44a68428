"""Configuration loading for TradeJournal.

Settings live in a TOML file, by default
``~/.config/tradejournal/config.toml``::

    [journal]
    user_id = "me"
    db_path = "~/.config/tradejournal/tradejournal.db"
    currency = "$"

The ``TRADEJOURNAL_CONFIG`` environment variable points at another file.
A missing file means defaults.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError

from tradejournal.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "tradejournal"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "tradejournal.db"
CONFIG_ENV_VAR = "TRADEJOURNAL_CONFIG"


class JournalConfig(BaseModel):
    """Resolved journal settings."""

    user_id: str = Field(default="local", min_length=1, description="Journal owner")
    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database file")
    currency: str = Field(default="₹", description="Currency symbol for display")

    model_config = {"frozen": True}


def get_config_path() -> Path:
    """Path of the config file, honouring ``TRADEJOURNAL_CONFIG``."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_PATH


def load_config(config_path: Optional[Path] = None) -> JournalConfig:
    """Load configuration from TOML.

    Args:
        config_path: Explicit file to read. Defaults to ``get_config_path()``.

    Returns:
        The resolved configuration.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    path = config_path or get_config_path()

    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return JournalConfig()

    try:
        data = toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    section = data.get("journal", {})
    if "db_path" in section:
        section = {**section, "db_path": Path(section["db_path"]).expanduser()}
    try:
        return JournalConfig(**section)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
