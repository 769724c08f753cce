"""Tests for the validation orchestrator."""

import time

import httpx
import pytest
import respx
from conftest import PROMETHEUS_URL, FakeBackend, healthy_series, metric_in_query
from promcheck.config.models import ConnectionConfig
from promcheck.providers.prometheus import (
    BackendUnreachableError,
    LikelyBadFilterExpressionError,
    PrometheusClient,
    UnexpectedStatusError,
)
from promcheck.report import format_report
from promcheck.verification.catalog import CATALOG
from promcheck.verification.engine import ValidationEngine, run_validation
from promcheck.verification.models import DiagnosticKind, JobSample, QueryOutcome


class SlowFirstBackend(FakeBackend):
    """Answers the first catalog metrics last, to scramble completion order."""

    def query(self, expression):
        position = [name for name, _ in CATALOG].index(metric_in_query(expression))
        time.sleep(0.002 * (len(CATALOG) - position))
        return super().query(expression)


class TestValidationEngine:
    """Tests for ValidationEngine.run."""

    def test_all_metrics_present_passes(self, config, healthy_backend):
        report = ValidationEngine(config, healthy_backend).run()

        assert report.passed is True
        assert report.diagnostics == ()

    def test_queries_every_catalog_metric_and_labels(self, config, healthy_backend):
        ValidationEngine(config, healthy_backend).run()

        queried = sorted(metric_in_query(q) for q in healthy_backend.queries)
        assert queried == sorted(name for name, _ in CATALOG)
        assert healthy_backend.label_requests == ["kube_node_labels"]

    def test_missing_node_labels_reports_both_checks(self, config):
        series = healthy_series()
        del series["kube_node_labels"]
        backend = FakeBackend(series=series, labels=())

        report = ValidationEngine(config, backend).run()

        assert report.passed is False
        assert [(d.kind, d.metric) for d in report.diagnostics] == [
            (DiagnosticKind.METRIC_MISSING, "kube_node_labels"),
            (DiagnosticKind.LABEL_METRIC_MISSING, "kube_node_labels"),
        ]

    def test_everything_missing(self, config):
        report = ValidationEngine(config, FakeBackend()).run()

        assert len(report.by_kind(DiagnosticKind.METRIC_MISSING)) == 15
        assert report.kinds == [
            DiagnosticKind.METRIC_MISSING,
            DiagnosticKind.LABEL_METRIC_MISSING,
        ]

    def test_job_overrides_are_used(self):
        config = ConnectionConfig(
            url=PROMETHEUS_URL,
            kubelet_job="cadvisor",
            kube_state_metrics_job="ksm",
        )
        series = {
            name: [("cadvisor" if source == "kubelet" else "ksm", 1.0)]
            for name, source in CATALOG
        }
        backend = FakeBackend(series=series, labels={"label_zone"})

        assert ValidationEngine(config, backend).run().passed

    def test_default_job_names_mismatch_overrides(self, config):
        series = {name: [("ksm", 1.0)] for name, _ in CATALOG}
        backend = FakeBackend(series=series, labels={"label_zone"})

        report = ValidationEngine(config, backend).run()

        assert len(report.by_kind(DiagnosticKind.SOURCE_MISMATCH)) == 15
        assert all(d.observed_jobs == ("ksm",) for d in report.diagnostics)

    def test_diagnostics_follow_catalog_order(self, config):
        backend = SlowFirstBackend()

        report = ValidationEngine(config, backend, max_workers=8).run()

        metrics = [d.metric for d in report.by_kind(DiagnosticKind.METRIC_MISSING)]
        assert metrics == [name for name, _ in CATALOG]

    def test_repeated_runs_render_identically(self, config):
        series = healthy_series()
        del series["kube_pod_info"]
        series["container_memory_usage_bytes"] = [("node-exporter", 1.0)]
        backend = SlowFirstBackend(series=series, labels={"instance"})
        engine = ValidationEngine(config, backend, max_workers=4)

        first = engine.run()
        second = engine.run()

        assert first == second
        assert "\n".join(format_report(first)) == "\n".join(format_report(second))

    def test_sequential_mode(self, config, healthy_backend):
        assert ValidationEngine(config, healthy_backend, max_workers=1).run().passed

    def test_invalid_worker_count(self, config, healthy_backend):
        with pytest.raises(ValueError):
            ValidationEngine(config, healthy_backend, max_workers=0)

    def test_transport_error_aborts_run(self, config):
        backend = FakeBackend(error=LikelyBadFilterExpressionError(403, "forbidden"))

        with pytest.raises(LikelyBadFilterExpressionError):
            ValidationEngine(config, backend).run()

    def test_label_transport_error_aborts_run(self, config):
        class LabelsDown(FakeBackend):
            def labels(self, metric_name):
                raise BackendUnreachableError("down")

        backend = LabelsDown(series=healthy_series())

        with pytest.raises(BackendUnreachableError):
            ValidationEngine(config, backend).run()

    def test_first_match_wins(self, config):
        class Duplicates(FakeBackend):
            def query(self, expression):
                super().query(expression)
                return QueryOutcome(
                    samples=(
                        JobSample("kube-state-metrics", 1.0),
                        JobSample("kubelet", 1.0),
                        JobSample("kube-state-metrics", 2.0),
                    )
                )

        report = ValidationEngine(config, Duplicates(labels={"label_a"})).run()

        assert report.passed


class TestAgainstHttpApi:
    """End-to-end runs through the real client against a mocked HTTP API."""

    def test_scenario_all_present(self, config, prometheus_api):
        report = run_validation(config)

        assert report.passed is True
        assert report.diagnostics == ()

    def test_scenario_node_labels_absent(self, config, prometheus_api):
        del prometheus_api["series"]["kube_node_labels"]
        prometheus_api["labels"] = []

        report = run_validation(config)

        assert report.passed is False
        assert [d.kind for d in report.diagnostics] == [
            DiagnosticKind.METRIC_MISSING,
            DiagnosticKind.LABEL_METRIC_MISSING,
        ]

    def test_forbidden_aborts_before_any_report(self, config, prometheus_api):
        prometheus_api["status"] = 403

        with pytest.raises(LikelyBadFilterExpressionError):
            run_validation(config)

    def test_filter_condition_reaches_backend(self, prometheus_api):
        config = ConnectionConfig(url=PROMETHEUS_URL, query_condition='cluster="prod"')

        run_validation(config, max_workers=2)

        queries = [
            r.url.params["query"] for r in prometheus_api["requests"] if "query" in r.url.params
        ]
        assert len(queries) == 15
        assert all('{cluster="prod"}' in q for q in queries)

    @respx.mock
    def test_engine_with_explicit_client(self, config):
        respx.get(f"{PROMETHEUS_URL}/api/v1/query").mock(
            return_value=httpx.Response(500, text="boom")
        )

        with PrometheusClient(config) as client:
            with pytest.raises(UnexpectedStatusError) as exc_info:
                ValidationEngine(config, client, max_workers=1).run()

        assert exc_info.value.status_code == 500
