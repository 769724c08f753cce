"""
Validation orchestrator.

Runs the metric verifier over the whole catalog, then the node label
inspection, and assembles a single report.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from promcheck.config.models import ConnectionConfig
from promcheck.logging import bind_context
from promcheck.providers.prometheus import PrometheusClient, PrometheusClientError
from promcheck.verification.catalog import catalog_for
from promcheck.verification.models import Diagnostic, ValidationReport
from promcheck.verification.verifier import MetricsBackend, MetricVerifier

DEFAULT_MAX_WORKERS = 4


class ValidationEngine:
    """
    Validates one Prometheus backend against the metric catalog.

    Per-metric queries are independent, so they run on a bounded thread
    pool. Diagnostics are always collected in catalog order regardless of
    completion order, which keeps reports reproducible.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        backend: MetricsBackend,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.config = config
        self.verifier = MetricVerifier(backend, query_condition=config.query_condition)
        self.max_workers = max_workers

    def run(self) -> ValidationReport:
        """
        Run the validation.

        Raises:
            PrometheusClientError: If any query could not be executed; no
                partial report is produced.
        """
        log = bind_context(target=self.config.url)
        catalog = catalog_for(self.config)
        diagnostics: list[Diagnostic] = []

        log.info("validation_started", metrics=len(catalog), max_workers=self.max_workers)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures: list[Future[list[Diagnostic]]] = [
                pool.submit(self.verifier.verify_metric, expectation) for expectation in catalog
            ]
            try:
                for future in futures:
                    diagnostics.extend(future.result())
            except PrometheusClientError as exc:
                for pending in futures:
                    pending.cancel()
                log.error("validation_aborted", error=str(exc), error_type=type(exc).__name__)
                raise

        try:
            diagnostics.extend(self.verifier.inspect_labels())
        except PrometheusClientError as exc:
            log.error("validation_aborted", error=str(exc), error_type=type(exc).__name__)
            raise

        report = ValidationReport(diagnostics=tuple(diagnostics))
        log.info("validation_finished", passed=report.passed, diagnostics=len(diagnostics))
        return report


def run_validation(
    config: ConnectionConfig,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> ValidationReport:
    """
    Convenience function to validate a backend with a fresh client.

    Args:
        config: Connection parameters
        max_workers: Number of concurrent queries

    Returns:
        ValidationReport
    """
    with PrometheusClient(config) as client:
        return ValidationEngine(config, client, max_workers=max_workers).run()
