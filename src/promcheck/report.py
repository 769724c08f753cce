"""
Rendering of validation reports.

The text format prints one summary block per kind of problem found, not
one line per metric. Per-metric details are available separately.
"""

from __future__ import annotations

import json

from promcheck.verification.catalog import LABEL_PREFIX, LABELS_METRIC
from promcheck.verification.models import DiagnosticKind, ValidationReport

BANNER = "-" * 44

PASSED = "Validation passed"
NOT_PASSED = "Validation did not pass"

GUIDANCE: dict[DiagnosticKind, str] = {
    DiagnosticKind.METRIC_MISSING: (
        " - Some metrics are missing, check if all required targets are enabled and healthy\n"
        "   CAdvisor and kube-state-metrics are required"
    ),
    DiagnosticKind.SOURCE_MISMATCH: (
        " - Some metrics have different job names\n"
        "   Specify correct job names (--kubelet-job / --kube-state-metrics-job)"
    ),
    DiagnosticKind.LABEL_METRIC_MISSING: (
        f" - {LABELS_METRIC} metric is missing\n"
        "   make sure you have enabled the labels collection"
    ),
    DiagnosticKind.LABEL_PREFIX_MISSING: (
        f" - {LABELS_METRIC} labels must have a `{LABEL_PREFIX}` prefix"
    ),
}


def format_report(report: ValidationReport) -> list[str]:
    """Render the report summary as plain text lines."""
    lines = [BANNER]
    if report.passed:
        lines.append(PASSED)
    else:
        lines.append(NOT_PASSED)
        for kind in report.kinds:
            lines.extend(GUIDANCE[kind].split("\n"))
    lines.append(BANNER)
    return lines


def format_details(report: ValidationReport) -> list[str]:
    """Render one line per diagnostic, in report order."""
    return [f"{d.metric}: {d.detail}" for d in report.diagnostics]


def report_to_json(report: ValidationReport) -> str:
    return json.dumps(report.to_dict(), indent=2)
