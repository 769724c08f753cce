"""
Configuration file loading and saving.

The file holds a single ``prometheus:`` mapping with the connection
parameters. It is read by ``promcheck check --config`` and written after
a successful validation with ``--write-config``, so the collector can be
deployed with the same parameters.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import yaml

from promcheck.config.models import ConfigError, ConnectionConfig

logger = structlog.get_logger()

CONFIG_SECTION = "prometheus"


class YamlConfigSource:
    """Loads a ConnectionConfig from a YAML file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> ConnectionConfig:
        """Load configuration from file."""
        try:
            with open(self.path) as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {self.path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing config file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.path} must contain a mapping")

        section = data.get(CONFIG_SECTION, data)
        if not isinstance(section, dict):
            raise ConfigError(f"'{CONFIG_SECTION}' in {self.path} must be a mapping")

        config = ConnectionConfig.from_dict(section)
        logger.debug("loaded_config", path=str(self.path))
        return config


class YamlConfigSink:
    """Writes a ConnectionConfig to a YAML file."""

    def save(self, config: ConnectionConfig, path: Path) -> Path:
        """Save configuration to file."""
        target_path = Path(path)
        target_path.parent.mkdir(parents=True, exist_ok=True)

        document: dict[str, Any] = {CONFIG_SECTION: config.to_dict()}

        # May contain a password
        fd = os.open(target_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # O_CREAT only applies the mode to new files
        os.chmod(target_path, 0o600)
        with os.fdopen(fd, "w") as f:
            yaml.dump(document, f, default_flow_style=False, sort_keys=False)

        logger.info("saved_config", path=str(target_path))
        return target_path


def load_config(path: str | Path) -> ConnectionConfig:
    """
    Convenience function to load configuration.

    Args:
        path: Config file path

    Returns:
        ConnectionConfig instance
    """
    return YamlConfigSource(path).load()


def save_config(config: ConnectionConfig, path: str | Path) -> Path:
    """
    Convenience function to save configuration.

    Args:
        config: Configuration to save
        path: Target file path
    """
    return YamlConfigSink().save(config, Path(path))
