"""
Configuration loading for templatepub.

Settings are resolved from multiple sources:
1. Environment variables (highest precedence)
2. Command-line provided config file
3. Config file in current directory
4. User's XDG config directory
5. Default values (lowest precedence)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from templatepub.config.models import PublishConfig
from templatepub.core.errors import ConfigError
from templatepub.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)

ENV_PREFIX = "TEMPLATEPUB_"


def generate_config_paths(cli_config_path: str | Path | None = None) -> list[Path]:
    """Generate a list of config paths to search in order of precedence."""
    config_paths = []

    if cli_config_path:
        config_paths.append(Path(cli_config_path).expanduser().resolve())

    config_paths.extend(
        [Path.cwd() / "templatepub.yaml", Path.cwd() / ".templatepub.yml"]
    )

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    config_home = (
        Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    )
    config_paths.extend(
        [
            config_home / "templatepub" / "config.yaml",
            config_home / "templatepub" / "config.yml",
        ]
    )

    return config_paths


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file, returning an empty mapping for empty files."""
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_config(cli_config_path: str | Path | None = None) -> PublishConfig:
    """Load the publish configuration.

    An explicitly given config file must exist; the other search locations
    are optional.

    Raises:
        ConfigError: If the config file is unreadable or values are invalid
    """
    if cli_config_path and not Path(cli_config_path).expanduser().exists():
        raise ConfigError(f"Config file not found: {cli_config_path}")

    config_data: dict[str, Any] = {}
    for path in generate_config_paths(cli_config_path):
        if path.is_file():
            config_data = read_config_file(path)
            logger.debug("config_file_loaded", path=str(path))
            break
    else:
        logger.debug("no_config_file_found")

    if logging.getLogger().isEnabledFor(logging.DEBUG):
        env_keys = sorted(k for k in os.environ if k.startswith(ENV_PREFIX))
        if env_keys:
            logger.debug("config_env_overrides", keys=env_keys)

    try:
        return PublishConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
