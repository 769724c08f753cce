"""
Per-metric verification against a Prometheus backend.

Each catalog entry is checked with a ``count by (job)`` aggregation so a
single query tells both whether the metric exists and which scrape jobs
emit it.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from promcheck.verification.catalog import LABEL_PREFIX, LABELS_METRIC
from promcheck.verification.models import (
    Diagnostic,
    DiagnosticKind,
    MetricExpectation,
    QueryOutcome,
)

logger = structlog.get_logger()


class MetricsBackend(Protocol):
    """The two read operations the verifier needs from Prometheus."""

    def query(self, expression: str) -> QueryOutcome:
        ...

    def labels(self, metric_name: str) -> frozenset[str]:
        ...


def build_count_query(metric: str, condition: str = "") -> str:
    """
    Build the aggregation query for one metric.

    The filter condition is inserted verbatim inside the selector braces.
    """
    return f"count by (job) ({metric}{{{condition}}})"


class MetricVerifier:
    """
    Verifies catalog metrics exist and come from the expected job.

    Transport errors from the backend are not caught here; they abort the
    whole validation run.
    """

    def __init__(self, backend: MetricsBackend, query_condition: str = ""):
        """
        Initialize verifier.

        Args:
            backend: Client used to run queries
            query_condition: Optional label filter applied to every query
        """
        self.backend = backend
        self.query_condition = query_condition

    def verify_metric(self, expectation: MetricExpectation) -> list[Diagnostic]:
        """
        Verify a single metric.

        Returns:
            Empty list on success, otherwise exactly one diagnostic
        """
        metric = expectation.metric
        outcome = self.backend.query(build_count_query(metric, self.query_condition))

        if outcome.is_empty:
            logger.warning("metric_missing", metric=metric)
            return [
                Diagnostic(
                    kind=DiagnosticKind.METRIC_MISSING,
                    metric=metric,
                    detail=f"Missing metric {metric}",
                )
            ]

        for sample in outcome.samples:
            if sample.job == expectation.expected_job:
                logger.info("metric_found", metric=metric, job=sample.job)
                return []

        observed = tuple(outcome.jobs)
        logger.warning(
            "job_name_mismatch",
            metric=metric,
            expected_job=expectation.expected_job,
            observed_jobs=list(observed),
        )
        return [
            Diagnostic(
                kind=DiagnosticKind.SOURCE_MISMATCH,
                metric=metric,
                detail=(
                    f"Can't find metric {metric} with the specified job name "
                    f"{expectation.expected_job}, found job names: {', '.join(observed)}"
                ),
                observed_jobs=observed,
            )
        ]

    def inspect_labels(self) -> list[Diagnostic]:
        """
        Check that node labels are exported with the ``label_`` prefix.

        kube-state-metrics only exposes Kubernetes node labels when label
        collection is enabled, and then renames them to ``label_<name>``.
        """
        labels = self.backend.labels(LABELS_METRIC)

        if not labels:
            logger.warning("metric_missing", metric=LABELS_METRIC)
            return [
                Diagnostic(
                    kind=DiagnosticKind.LABEL_METRIC_MISSING,
                    metric=LABELS_METRIC,
                    detail=f"{LABELS_METRIC} metric is missing",
                )
            ]

        count = sum(1 for label in labels if label.startswith(LABEL_PREFIX))
        if count == 0:
            logger.warning("node_labels_without_prefix", metric=LABELS_METRIC, prefix=LABEL_PREFIX)
            return [
                Diagnostic(
                    kind=DiagnosticKind.LABEL_PREFIX_MISSING,
                    metric=LABELS_METRIC,
                    detail=f"{LABELS_METRIC} has no labels with a `{LABEL_PREFIX}` prefix",
                )
            ]

        logger.info("node_labels_found", metric=LABELS_METRIC, count=count)
        return []
