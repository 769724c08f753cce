"""
Models for metrics validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class MetricExpectation:
    """A metric the collector needs, and the scrape job expected to emit it."""

    metric: str
    expected_job: str


@dataclass(frozen=True)
class JobSample:
    """One row of a ``count by (job)`` query."""

    job: str
    value: float


@dataclass(frozen=True)
class QueryOutcome:
    """Result of one aggregation query, in the order Prometheus returned it."""

    samples: tuple[JobSample, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def jobs(self) -> list[str]:
        return [s.job for s in self.samples]


class DiagnosticKind(Enum):
    """Category of a validation finding. Declaration order is report order."""

    METRIC_MISSING = "metric_missing"
    SOURCE_MISMATCH = "source_mismatch"
    LABEL_METRIC_MISSING = "label_metric_missing"
    LABEL_PREFIX_MISSING = "label_prefix_missing"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding produced while validating one metric."""

    kind: DiagnosticKind
    metric: str
    detail: str
    observed_jobs: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "metric": self.metric,
            "detail": self.detail,
        }
        if self.observed_jobs:
            data["observed_jobs"] = list(self.observed_jobs)
        return data


@dataclass(frozen=True)
class ValidationReport:
    """Result of validating the whole metric catalog."""

    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        """True if no diagnostics were produced."""
        return not self.diagnostics

    @property
    def kinds(self) -> list[DiagnosticKind]:
        """Distinct diagnostic kinds present, in declaration order."""
        present = {d.kind for d in self.diagnostics}
        return [kind for kind in DiagnosticKind if kind in present]

    def by_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
