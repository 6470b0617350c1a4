"""Configuration loader for blockmark.toml."""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError

CONFIG_FILENAME = "blockmark.toml"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class IdsConfig:
    """Block id configuration."""
    prefix: str = "mv"


@dataclass
class ApiConfig:
    """Local JSON API configuration."""
    host: str = "127.0.0.1"
    port: int = 8765
    cors: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"

    def numeric_level(self) -> int:
        return getattr(logging, self.level)


@dataclass
class BlockmarkConfig:
    """Complete blockmark configuration."""
    ids: IdsConfig = field(default_factory=IdsConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Path | None = None  # file the values came from, if any


def load_config(config_path: Path | None = None) -> BlockmarkConfig:
    """
    Load configuration from blockmark.toml.

    Search order:
    1. config_path (if provided; must exist)
    2. cwd/blockmark.toml

    Args:
        config_path: Explicit path to config file

    Returns:
        BlockmarkConfig with resolved settings (defaults when no file found)
    """
    toml_data: dict[str, Any] = {}
    found: Path | None = None

    if config_path is not None and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_FILENAME)

    for path in search_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    toml_data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid TOML in {path}: {e}") from e
            found = path
            break

    # Parse ids config
    ids_data = toml_data.get("ids", {})
    prefix = ids_data.get("prefix", "mv")
    if not isinstance(prefix, str) or not prefix or ":" in prefix:
        raise ConfigError(f"ids.prefix must be a non-empty string without ':', got {prefix!r}")

    # Parse api config
    api_data = toml_data.get("api", {})
    port = api_data.get("port", 8765)
    if not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigError(f"api.port must be an integer in 1..65535, got {port!r}")
    api_config = ApiConfig(
        host=api_data.get("host", "127.0.0.1"),
        port=port,
        cors=bool(api_data.get("cors", False)),
    )

    # Parse logging config
    log_data = toml_data.get("logging", {})
    level = str(log_data.get("level", "WARNING")).upper()
    if level not in _LEVELS:
        raise ConfigError(f"logging.level must be one of {', '.join(_LEVELS)}, got {level!r}")

    return BlockmarkConfig(
        ids=IdsConfig(prefix=prefix),
        api=api_config,
        logging=LoggingConfig(level=level),
        path=found,
    )
