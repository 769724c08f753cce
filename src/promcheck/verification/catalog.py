"""
The fixed catalog of metrics the collector depends on.

Which job each metric comes from is domain knowledge: kube-state-metrics
exposes the object inventory (nodes, pods, replica sets), while the
kubelet's embedded cAdvisor exposes container runtime usage.
"""

from __future__ import annotations

from promcheck.config.models import ConnectionConfig
from promcheck.verification.models import MetricExpectation

# Metric whose label set is inspected for dynamically attached node labels
LABELS_METRIC = "kube_node_labels"
LABEL_PREFIX = "label_"

KUBE_STATE_METRICS = "kube_state_metrics"
KUBELET = "kubelet"

# (metric, source) in report order
CATALOG: tuple[tuple[str, str], ...] = (
    ("kube_node_labels", KUBE_STATE_METRICS),
    ("kube_node_info", KUBE_STATE_METRICS),
    ("kube_node_status_capacity", KUBE_STATE_METRICS),
    ("kube_pod_container_resource_requests", KUBE_STATE_METRICS),
    ("kube_pod_info", KUBE_STATE_METRICS),
    ("kube_pod_container_info", KUBE_STATE_METRICS),
    ("kube_pod_container_resource_limits", KUBE_STATE_METRICS),
    ("container_cpu_usage_seconds_total", KUBELET),
    ("container_memory_usage_bytes", KUBELET),
    ("container_network_receive_bytes_total", KUBELET),
    ("container_network_transmit_bytes_total", KUBELET),
    ("kube_pod_labels", KUBE_STATE_METRICS),
    ("kube_pod_created", KUBE_STATE_METRICS),
    ("kube_pod_completion_time", KUBE_STATE_METRICS),
    ("kube_replicaset_owner", KUBE_STATE_METRICS),
)


def build_catalog(kubelet_job: str, kube_state_metrics_job: str) -> list[MetricExpectation]:
    """
    Build the ordered list of metric expectations.

    Args:
        kubelet_job: Job name of the kubelet/cAdvisor scrape target
        kube_state_metrics_job: Job name of the kube-state-metrics scrape target

    Returns:
        Fifteen MetricExpectation entries in catalog order
    """
    jobs = {KUBELET: kubelet_job, KUBE_STATE_METRICS: kube_state_metrics_job}
    return [MetricExpectation(metric=name, expected_job=jobs[source]) for name, source in CATALOG]


def catalog_for(config: ConnectionConfig) -> list[MetricExpectation]:
    """Build the catalog with the job names configured for this run."""
    return build_catalog(config.kubelet_job, config.kube_state_metrics_job)
