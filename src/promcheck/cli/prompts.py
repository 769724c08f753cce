"""
Interactive collection of connection parameters.
"""

from __future__ import annotations

from promcheck.cli.ux import console, password_input, text_input
from promcheck.config.models import (
    KUBE_STATE_METRICS_DEFAULT_JOB_NAME,
    KUBELET_DEFAULT_JOB_NAME,
    ConfigError,
    ConnectionConfig,
    parse_headers,
)


class PromptConfigSource:
    """Asks the operator for every connection parameter in turn."""

    def load(self) -> ConnectionConfig:
        console.print("[muted]Leave optional answers empty to skip them.[/muted]")

        url = text_input("Prometheus url:")
        if not url:
            raise ConfigError("Prometheus url can't be empty")

        username = text_input("Username (leave empty if no authentication is required):")
        password = password_input("Password:") if username else ""

        headers = parse_headers(
            text_input(
                "Additional headers (format: header1:value1,header2:value2, "
                "leave empty if no headers required):"
            )
        )

        query_condition = text_input(
            "Enter a filtering condition for queries (leave empty if no filtering is required):"
        )
        kubelet_job = text_input(
            f"Enter the kubelet job name (default `{KUBELET_DEFAULT_JOB_NAME}`):"
        )
        kube_state_metrics_job = text_input(
            "Enter the kube-state-metrics job name "
            f"(default `{KUBE_STATE_METRICS_DEFAULT_JOB_NAME}`):"
        )

        return ConnectionConfig(
            url=url,
            username=username or None,
            password=password or None,
            headers=headers,
            query_condition=query_condition,
            kubelet_job=kubelet_job,
            kube_state_metrics_job=kube_state_metrics_job,
        )
