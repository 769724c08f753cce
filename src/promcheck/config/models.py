"""
Connection parameters for the Prometheus backend under validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import urlsplit

KUBELET_DEFAULT_JOB_NAME = "kubelet"
KUBE_STATE_METRICS_DEFAULT_JOB_NAME = "kube-state-metrics"
DEFAULT_TIMEOUT = 30.0


class ConfigError(ValueError):
    """Raised when connection parameters are missing or malformed."""


def validate_url(url: str) -> str:
    """Return the URL without a trailing slash, or raise ConfigError."""
    url = (url or "").strip()
    if not url:
        raise ConfigError("Prometheus url can't be empty")

    try:
        parts = urlsplit(url)
        # Accessing .port validates the port component
        _ = parts.port
    except ValueError as exc:
        raise ConfigError(f"Invalid Prometheus url {url!r}: {exc}") from exc

    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ConfigError(f"Invalid Prometheus url {url!r}: expected http(s)://host[:port][/path]")

    return url.rstrip("/")


def parse_headers(raw: str | None) -> dict[str, str]:
    """
    Parse headers given as ``header1:value1,header2:value2``.

    Entries are split on the first colon so values may contain colons.
    """
    headers: dict[str, str] = {}
    if not raw or not raw.strip():
        return headers

    for entry in raw.split(","):
        name, sep, value = entry.partition(":")
        name = name.strip()
        if not sep or not name:
            raise ConfigError(
                "Wrong headers format. Use this format: header1:value1,header2:value2"
            )
        value = value.strip()
        _validate_header(name, value)
        headers[name] = value

    return headers


def _validate_header(name: str, value: str) -> None:
    """HTTP header names and values must be printable ASCII on a single line."""
    for part in (name, value):
        if not part.isascii() or "\r" in part or "\n" in part:
            raise ConfigError(f"Header {name!r} must contain only ASCII characters on one line")


@dataclass(frozen=True)
class ConnectionConfig:
    """
    Everything needed to query one Prometheus backend.

    Immutable, so a single instance is shared by every concurrent query
    of a validation run.
    """

    url: str
    username: str | None = None
    password: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    query_condition: str = ""
    kubelet_job: str = KUBELET_DEFAULT_JOB_NAME
    kube_state_metrics_job: str = KUBE_STATE_METRICS_DEFAULT_JOB_NAME
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "url", validate_url(self.url))
        object.__setattr__(self, "username", (self.username or "").strip() or None)
        object.__setattr__(self, "headers", dict(self.headers or {}))
        object.__setattr__(self, "query_condition", (self.query_condition or "").strip())
        object.__setattr__(
            self,
            "kubelet_job",
            (self.kubelet_job or "").strip() or KUBELET_DEFAULT_JOB_NAME,
        )
        object.__setattr__(
            self,
            "kube_state_metrics_job",
            (self.kube_state_metrics_job or "").strip() or KUBE_STATE_METRICS_DEFAULT_JOB_NAME,
        )
        for name, value in self.headers.items():
            _validate_header(name, value)
        try:
            timeout = float(self.timeout)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Timeout must be a number, got {self.timeout!r}") from exc
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        object.__setattr__(self, "timeout", timeout)

    @property
    def auth(self) -> tuple[str, str] | None:
        """Basic auth pair, present whenever a username is configured."""
        if self.username:
            return (self.username, self.password or "")
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url}
        if self.username:
            data["username"] = self.username
            data["password"] = self.password or ""
        if self.headers:
            data["headers"] = dict(self.headers)
        if self.query_condition:
            data["query_condition"] = self.query_condition
        data["kubelet_job"] = self.kubelet_job
        data["kube_state_metrics_job"] = self.kube_state_metrics_job
        data["timeout"] = self.timeout
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConnectionConfig:
        headers = data.get("headers") or {}
        if isinstance(headers, str):
            headers = parse_headers(headers)
        elif not isinstance(headers, Mapping):
            raise ConfigError("headers must be a mapping of header name to value")

        return cls(
            url=data.get("url") or "",
            username=data.get("username"),
            password=data.get("password"),
            headers={str(k): str(v) for k, v in headers.items()},
            query_condition=data.get("query_condition") or "",
            kubelet_job=data.get("kubelet_job") or KUBELET_DEFAULT_JOB_NAME,
            kube_state_metrics_job=(
                data.get("kube_state_metrics_job") or KUBE_STATE_METRICS_DEFAULT_JOB_NAME
            ),
            timeout=data.get("timeout") or DEFAULT_TIMEOUT,
        )
