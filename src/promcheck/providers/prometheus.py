"""
Prometheus client for read-only validation queries.

Works against Prometheus and compatible APIs (VictoriaMetrics, Mimir, Thanos).
"""

from __future__ import annotations

from typing import Any

import httpx

from promcheck import __version__
from promcheck.config.models import ConnectionConfig
from promcheck.verification.models import JobSample, QueryOutcome

DEFAULT_USER_AGENT = f"promcheck/{__version__}"

QUERY_PATH = "/api/v1/query"
LABELS_PATH = "/api/v1/labels"


class PrometheusClientError(RuntimeError):
    """Raised when a query could not be executed or parsed."""


class BackendUnreachableError(PrometheusClientError):
    """Raised when Prometheus cannot be reached or does not answer in time."""


class UnexpectedStatusError(PrometheusClientError):
    """Raised for a non-success HTTP status outside the 4xx range."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class LikelyBadFilterExpressionError(UnexpectedStatusError):
    """Raised for a 4xx status, usually caused by a malformed filter condition."""


class MalformedResponseError(PrometheusClientError):
    """Raised when the response body is not the expected Prometheus payload."""


class PrometheusClient:
    """
    Minimal synchronous Prometheus API client.

    A single httpx.Client is shared by all queries of a run; it is safe to
    call from several worker threads.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        headers = {"User-Agent": user_agent}
        headers.update(config.headers)
        self._client = httpx.Client(
            base_url=config.url,
            auth=config.auth,
            headers=headers,
            timeout=config.timeout,
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> PrometheusClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def url(self) -> str:
        return self._config.url

    def query(self, expression: str) -> QueryOutcome:
        """
        Execute an instant query.

        Args:
            expression: PromQL expression, expected to aggregate by job

        Returns:
            QueryOutcome with one JobSample per result series
        """
        data = self._get(QUERY_PATH, params={"query": expression})

        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, list):
            raise MalformedResponseError(
                f"Error parsing JSON response: expected data.result list, got {data!r}"
            )

        samples = []
        for series in result:
            try:
                metric = series.get("metric") or {}
                value = float(series["value"][1])
            except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
                raise MalformedResponseError(
                    f"Error parsing JSON response: bad series {series!r}"
                ) from exc
            samples.append(JobSample(job=str(metric.get("job", "")), value=value))

        return QueryOutcome(samples=tuple(samples))

    def labels(self, metric_name: str) -> frozenset[str]:
        """
        List label names present on the series of one metric.

        Returns:
            Set of label names; empty when the metric does not exist
        """
        data = self._get(LABELS_PATH, params={"match[]": metric_name})
        if data is None:
            # Some backends answer null instead of [] for an unknown metric
            return frozenset()

        if not isinstance(data, list) or not all(isinstance(name, str) for name in data):
            raise MalformedResponseError(
                f"Error parsing JSON response: expected list of label names, got {data!r}"
            )

        return frozenset(data)

    def _get(self, path: str, params: dict[str, str]) -> Any:
        """Execute a GET request and return the payload's ``data`` field."""
        try:
            resp = self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise BackendUnreachableError(
                f"Timeout connecting to Prometheus at {self._config.url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise BackendUnreachableError(
                f"Cannot connect to Prometheus at {self._config.url}: {exc}"
            ) from exc

        if not resp.is_success:
            message = f"Unexpected HTTP status code: {resp.status_code} {resp.reason_phrase}"
            if 400 <= resp.status_code < 500:
                raise LikelyBadFilterExpressionError(resp.status_code, message)
            raise UnexpectedStatusError(resp.status_code, message)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"Error parsing JSON response: {exc}") from exc

        if not isinstance(payload, dict) or "data" not in payload:
            raise MalformedResponseError("Error parsing JSON response: missing 'data' field")

        # Check Prometheus API status
        status = payload.get("status", "success")
        if status != "success":
            error = payload.get("error", "Unknown error")
            raise MalformedResponseError(f"Prometheus API error: {error}")

        return payload["data"]
