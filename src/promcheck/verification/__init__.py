"""
Metrics validation for promcheck.

Verifies that a Prometheus backend exposes every metric the Kubernetes
collector depends on, emitted by the expected scrape job, and that node
labels are exported.

The orchestrator lives in ``promcheck.verification.engine``.
"""

from .catalog import LABEL_PREFIX, LABELS_METRIC, build_catalog, catalog_for
from .models import (
    Diagnostic,
    DiagnosticKind,
    JobSample,
    MetricExpectation,
    QueryOutcome,
    ValidationReport,
)
from .verifier import MetricVerifier, build_count_query

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "JobSample",
    "LABELS_METRIC",
    "LABEL_PREFIX",
    "MetricExpectation",
    "MetricVerifier",
    "QueryOutcome",
    "ValidationReport",
    "build_catalog",
    "build_count_query",
    "catalog_for",
]
