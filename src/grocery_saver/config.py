"""Configuration management for Grocery Saver."""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .data_store import BackendType
from .models import Category
from .solver import MAX_STORE_COUNT, clamp_store_count

logger = logging.getLogger(__name__)


def parse_backend(value: Any) -> str:
    """Known backend name, falling back to JSON for anything else."""
    name = str(value).strip().lower()
    if name in {b.value for b in BackendType}:
        return name
    logger.warning("Unknown storage backend %r, using json", value)
    return BackendType.JSON.value


@dataclass
class DataConfig:
    """Data storage configuration."""

    storage_dir: Path
    backend: str = "json"


@dataclass
class DefaultsConfig:
    """Default values configuration."""

    category: str = Category.PRODUCE.value
    max_stores: int = 1


@dataclass
class PlannerConfig:
    """Shopping plan configuration."""

    store_limit: int = MAX_STORE_COUNT


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    defaults: DefaultsConfig
    planner: PlannerConfig
    logging: LoggingConfig


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()

    @property
    def data(self) -> DataConfig:
        """Get data configuration."""
        return self._config.data

    @property
    def defaults(self) -> DefaultsConfig:
        """Get defaults configuration."""
        return self._config.defaults

    @property
    def planner(self) -> PlannerConfig:
        """Get planner configuration."""
        return self._config.planner

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        return self._config.logging

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "grocery-saver" / "config.toml",
            Path.home() / ".grocery-saver" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        # Return default location if none found
        return Path.home() / ".config" / "grocery-saver" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        data_section = data.get("data", {})
        defaults_section = data.get("defaults", {})
        planner_section = data.get("planner", {})

        store_limit = clamp_store_count(int(planner_section.get("store_limit", MAX_STORE_COUNT)))

        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data_section.get("storage_dir", "~/grocery-saver/data")
                ).expanduser(),
                backend=parse_backend(data_section.get("backend", "json")),
            ),
            defaults=DefaultsConfig(
                category=defaults_section.get("category", Category.PRODUCE.value),
                max_stores=clamp_store_count(
                    int(defaults_section.get("max_stores", 1)), upper=store_limit
                ),
            ),
            planner=PlannerConfig(store_limit=store_limit),
            logging=LoggingConfig(
                level=str(data.get("logging", {}).get("level", "WARNING")).upper(),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(
            data=DataConfig(storage_dir=Path.home() / "grocery-saver" / "data"),
            defaults=DefaultsConfig(),
            planner=PlannerConfig(),
            logging=LoggingConfig(),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'data.storage_dir'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value: Any = self._config

        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            elif isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default
