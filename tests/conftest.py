"""Root test configuration."""

from __future__ import annotations

import logging
import re
import threading

import httpx
import pytest
import respx
import structlog
from promcheck.config.models import ConnectionConfig
from promcheck.config.settings import get_settings
from promcheck.verification.catalog import CATALOG, KUBELET
from promcheck.verification.models import JobSample, QueryOutcome

PROMETHEUS_URL = "http://prometheus.test:9090"

_METRIC_IN_QUERY = re.compile(r"\(([a-zA-Z_:][a-zA-Z0-9_:]*)\{")


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep PROMCHECK_* variables and .env files out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("PROMCHECK_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def metric_in_query(expression: str) -> str:
    """Extract the metric name from a ``count by (job) (metric{...})`` query."""
    match = _METRIC_IN_QUERY.search(expression)
    assert match, f"unexpected query {expression!r}"
    return match.group(1)


def healthy_series() -> dict[str, list[tuple[str, float]]]:
    """Every catalog metric present with the default job names."""
    return {
        metric: [("kubelet" if source == KUBELET else "kube-state-metrics", 3.0)]
        for metric, source in CATALOG
    }


class FakeBackend:
    """In-memory stand-in for PrometheusClient."""

    def __init__(self, series=None, labels=(), error=None):
        self.series = dict(series or {})
        self.node_labels = frozenset(labels)
        self.error = error
        self.queries: list[str] = []
        self.label_requests: list[str] = []
        self._lock = threading.Lock()

    def query(self, expression: str) -> QueryOutcome:
        with self._lock:
            self.queries.append(expression)
        if self.error is not None:
            raise self.error
        rows = self.series.get(metric_in_query(expression), [])
        return QueryOutcome(samples=tuple(JobSample(job, value) for job, value in rows))

    def labels(self, metric_name: str) -> frozenset[str]:
        with self._lock:
            self.label_requests.append(metric_name)
        if self.error is not None:
            raise self.error
        return self.node_labels


@pytest.fixture
def config():
    return ConnectionConfig(url=PROMETHEUS_URL)


@pytest.fixture
def healthy_backend():
    return FakeBackend(series=healthy_series(), labels={"label_region", "instance", "job"})


@pytest.fixture
def prometheus_api():
    """
    Mock the Prometheus HTTP API.

    Returns the mutable state dict: ``series`` maps metric to (job, value)
    rows, ``labels`` is the label set of kube_node_labels and ``status`` can
    force an HTTP status for every request.
    """
    state = {
        "series": healthy_series(),
        "labels": ["__name__", "instance", "job", "label_region"],
        "status": None,
        "requests": [],
    }

    def query_handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        if state["status"]:
            return httpx.Response(state["status"], json={"status": "error", "error": "forced"})
        metric = metric_in_query(request.url.params["query"])
        result = [
            {"metric": {"job": job}, "value": [1700000000, str(value)]}
            for job, value in state["series"].get(metric, [])
        ]
        return httpx.Response(
            200,
            json={"status": "success", "data": {"resultType": "vector", "result": result}},
        )

    def labels_handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        if state["status"]:
            return httpx.Response(state["status"], json={"status": "error", "error": "forced"})
        return httpx.Response(200, json={"status": "success", "data": state["labels"]})

    with respx.mock(base_url=PROMETHEUS_URL, assert_all_called=False) as mock:
        mock.get("/api/v1/query").mock(side_effect=query_handler)
        mock.get("/api/v1/labels").mock(side_effect=labels_handler)
        yield state
