"""
Application settings using Pydantic.

Provides environment-based configuration loading with PROMCHECK_ prefix.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from promcheck.config.models import (
    DEFAULT_TIMEOUT,
    KUBE_STATE_METRICS_DEFAULT_JOB_NAME,
    KUBELET_DEFAULT_JOB_NAME,
    ConfigError,
    ConnectionConfig,
    parse_headers,
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROMCHECK_",
        extra="ignore",
    )

    # Prometheus connection
    url: str | None = None
    username: str | None = None
    password: str | None = None
    headers: str | None = None  # header1:value1,header2:value2
    query_condition: str = ""

    # Job names
    kubelet_job: str = KUBELET_DEFAULT_JOB_NAME
    kube_state_metrics_job: str = KUBE_STATE_METRICS_DEFAULT_JOB_NAME

    # HTTP client settings
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = 4

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class EnvConfigSource:
    """
    Builds a ConnectionConfig from settings, overlaid with explicit values.

    Overrides that are None are ignored so unset CLI flags fall through to
    the PROMCHECK_* environment.
    """

    def __init__(self, settings: Settings | None = None, **overrides: Any):
        self.settings = settings or get_settings()
        self.overrides = {k: v for k, v in overrides.items() if v is not None}

    def load(self) -> ConnectionConfig:
        values: dict[str, Any] = {
            "url": self.settings.url,
            "username": self.settings.username,
            "password": self.settings.password,
            "headers": self.settings.headers,
            "query_condition": self.settings.query_condition,
            "kubelet_job": self.settings.kubelet_job,
            "kube_state_metrics_job": self.settings.kube_state_metrics_job,
            "timeout": self.settings.timeout,
        }
        values.update(self.overrides)

        if not values["url"]:
            raise ConfigError("Prometheus url can't be empty")

        headers = values["headers"]
        if headers is None or isinstance(headers, str):
            values["headers"] = parse_headers(headers)

        return ConnectionConfig(**values)
