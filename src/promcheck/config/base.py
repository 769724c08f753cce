from __future__ import annotations

from pathlib import Path
from typing import Protocol

from promcheck.config.models import ConnectionConfig


class ConfigSource(Protocol):
    """Produces the connection parameters for one validation run."""

    def load(self) -> ConnectionConfig:
        ...


class ConfigSink(Protocol):
    """Persists validated connection parameters for the collector."""

    def save(self, config: ConnectionConfig, path: Path) -> Path:
        ...
