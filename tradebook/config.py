"""Configuration loading for tradebook.

Settings live in ``~/.config/tradebook/config.toml``. A missing file means
defaults; every section and key is optional.
"""

from pathlib import Path
from typing import Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_DIR = Path.home() / ".config" / "tradebook"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"


class StorageConfig(BaseModel):
    db_path: Path = CONFIG_DIR / "tradebook.db"
    dashboard_path: Path = CONFIG_DIR / "dashboard" / "index.html"


class TradingConfig(BaseModel):
    commission: float = Field(default=1.0, ge=0, description="Flat round-trip commission")
    contract_multiplier: int = Field(default=100, gt=0, description="Shares per options contract")


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, value):
        return value.upper() if isinstance(value, str) else value


class AppConfig(BaseModel):
    storage: StorageConfig = StorageConfig()
    trading: TradingConfig = TradingConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from a TOML file.

    Args:
        path: Config file path. Defaults to ``~/.config/tradebook/config.toml``.

    Returns:
        Parsed configuration, or defaults if the file does not exist.

    Raises:
        ValueError: If the file exists but cannot be parsed or holds invalid
            settings.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return AppConfig()

    try:
        data = toml.load(config_path)
    except toml.TomlDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    try:
        config = AppConfig(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    storage = config.storage.model_copy(
        update={
            "db_path": config.storage.db_path.expanduser(),
            "dashboard_path": config.storage.dashboard_path.expanduser(),
        }
    )
    return config.model_copy(update={"storage": storage})
