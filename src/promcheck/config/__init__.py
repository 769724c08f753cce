"""
Configuration for promcheck.

Connection parameters come from a ConfigSource (flags/environment, a YAML
file, or interactive prompts) and may be written back through a ConfigSink
once validation passes.
"""

from promcheck.config.base import ConfigSink, ConfigSource
from promcheck.config.loader import YamlConfigSink, YamlConfigSource, load_config, save_config
from promcheck.config.models import (
    KUBE_STATE_METRICS_DEFAULT_JOB_NAME,
    KUBELET_DEFAULT_JOB_NAME,
    ConfigError,
    ConnectionConfig,
    parse_headers,
)
from promcheck.config.settings import EnvConfigSource, Settings, get_settings

__all__ = [
    "ConfigError",
    "ConfigSink",
    "ConfigSource",
    "ConnectionConfig",
    "EnvConfigSource",
    "KUBELET_DEFAULT_JOB_NAME",
    "KUBE_STATE_METRICS_DEFAULT_JOB_NAME",
    "Settings",
    "YamlConfigSink",
    "YamlConfigSource",
    "get_settings",
    "load_config",
    "parse_headers",
]
