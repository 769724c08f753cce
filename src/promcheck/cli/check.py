"""
CLI command for metrics validation.

Checks that a Prometheus backend exposes every metric the Kubernetes
collector needs, from the expected jobs.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from rich.markup import escape

from promcheck.cli.prompts import PromptConfigSource
from promcheck.cli.ux import console, error, info, is_interactive, spinner, success, warning
from promcheck.config import (
    ConfigError,
    ConfigSink,
    ConfigSource,
    EnvConfigSource,
    Settings,
    YamlConfigSink,
    YamlConfigSource,
    get_settings,
    parse_headers,
)
from promcheck.providers.prometheus import (
    LikelyBadFilterExpressionError,
    PrometheusClient,
    PrometheusClientError,
)
from promcheck.report import format_details, format_report, report_to_json
from promcheck.verification.engine import ValidationEngine
from promcheck.verification.models import ValidationReport

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_NOT_PASSED = 2


def check_command(
    source: ConfigSource,
    max_workers: int = 4,
    output_format: str = "text",
    verbose: bool = False,
    strict: bool = False,
    write_config: Optional[str] = None,
    sink: Optional[ConfigSink] = None,
) -> int:
    """
    Validate a Prometheus backend and print the report.

    Exit codes:
        0 = Report rendered (passed, or not passed without --strict)
        1 = Validation could not run (bad configuration, backend errors)
        2 = Report did not pass and strict mode is on

    Args:
        source: Where the connection parameters come from
        max_workers: Number of concurrent queries
        output_format: "text" or "json"
        verbose: Print one line per diagnostic after the summary
        strict: Exit 2 when validation did not pass
        write_config: Path to write the validated configuration to
        sink: Writer for the validated configuration

    Returns:
        Exit code
    """
    try:
        config = source.load()
    except ConfigError as e:
        error(str(e))
        return EXIT_RUN_FAILED

    try:
        with PrometheusClient(config) as client:
            engine = ValidationEngine(config, client, max_workers=max_workers)
            if output_format == "text":
                with spinner(f"Checking metrics in {client.url}"):
                    report = engine.run()
            else:
                report = engine.run()
    except LikelyBadFilterExpressionError as e:
        error(str(e))
        console.print("[muted]Make sure filtering condition is correct[/muted]")
        return EXIT_RUN_FAILED
    except PrometheusClientError as e:
        error(str(e))
        return EXIT_RUN_FAILED

    if output_format == "json":
        console.out(report_to_json(report), highlight=False)
    else:
        _print_report(report, verbose=verbose)

    if report.passed and write_config:
        path = (sink or YamlConfigSink()).save(config, Path(write_config))
        success(f"Configuration written to {path}")
    elif write_config:
        warning("Validation did not pass, configuration not written")

    if strict and not report.passed:
        return EXIT_NOT_PASSED
    return EXIT_OK


def _print_report(report: ValidationReport, verbose: bool = False) -> None:
    """Print report summary with styling."""
    for line in format_report(report):
        console.print(line, markup=False, soft_wrap=True)

    if verbose and not report.passed:
        console.print()
        console.print("[bold]Details:[/bold]")
        for line in format_details(report):
            console.print(f"  [muted]•[/muted] {escape(line)}", soft_wrap=True)


def resolve_source(args: argparse.Namespace, settings: Settings) -> ConfigSource:
    """Pick the config source: file, flags/environment, or prompts."""
    if getattr(args, "config", None):
        return YamlConfigSource(args.config)

    headers = _headers_from_args(args)

    if getattr(args, "url", None) or settings.url:
        return EnvConfigSource(
            settings,
            url=getattr(args, "url", None),
            username=getattr(args, "username", None),
            password=getattr(args, "password", None),
            headers=headers,
            query_condition=getattr(args, "query_condition", None),
            kubelet_job=getattr(args, "kubelet_job", None),
            kube_state_metrics_job=getattr(args, "kube_state_metrics_job", None),
            timeout=getattr(args, "timeout", None),
        )

    if is_interactive():
        return PromptConfigSource()

    return _MissingUrlSource()


def _headers_from_args(args: argparse.Namespace) -> Optional[dict[str, str]]:
    """Merge --headers and repeated --header flags; None if neither given."""
    combined = getattr(args, "headers", None)
    single = getattr(args, "header", None) or []
    if combined is None and not single:
        return None

    headers = parse_headers(combined)
    for entry in single:
        headers.update(parse_headers(entry))
    return headers


class _MissingUrlSource:
    def load(self):
        raise ConfigError(
            "No Prometheus URL provided. Use --url, PROMCHECK_URL or run in a terminal"
        )


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def register_check_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register check subcommand parser."""
    parser = subparsers.add_parser(
        "check",
        help="Check if all required metrics are available in Prometheus",
    )

    parser.add_argument("--url", "-u", help="Prometheus URL (or set PROMCHECK_URL)")
    parser.add_argument("--username", help="Basic auth username")
    parser.add_argument("--password", help="Basic auth password")
    parser.add_argument(
        "--header",
        action="append",
        metavar="NAME:VALUE",
        help="Extra request header (repeatable)",
    )
    parser.add_argument(
        "--headers",
        metavar="H1:V1,H2:V2",
        help="Extra request headers as a comma separated list",
    )
    parser.add_argument(
        "--query-condition",
        help='Label filter added to every query, e.g. cluster="prod"',
    )
    parser.add_argument("--kubelet-job", help="Job name of the kubelet target")
    parser.add_argument("--kube-state-metrics-job", help="Job name of kube-state-metrics")
    parser.add_argument("--timeout", type=float, help="Per-query timeout in seconds")
    parser.add_argument(
        "--max-workers", type=_positive_int, help="Number of concurrent queries"
    )
    parser.add_argument("--config", "-c", help="Load connection parameters from a YAML file")
    parser.add_argument(
        "--write-config",
        metavar="FILE",
        help="Write the configuration to FILE when validation passes",
    )
    parser.add_argument("--output", choices=["text", "json"], default="text", help="Output format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show every diagnostic")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with code 2 when validation does not pass",
    )


def handle_check_command(args: argparse.Namespace) -> int:
    """Handle check subcommand."""
    settings = get_settings()

    try:
        source = resolve_source(args, settings)
    except ConfigError as e:
        error(str(e))
        return EXIT_RUN_FAILED

    if isinstance(source, PromptConfigSource):
        info("Enter the Prometheus connection parameters")

    return check_command(
        source,
        max_workers=getattr(args, "max_workers", None) or settings.max_workers,
        output_format=getattr(args, "output", "text"),
        verbose=getattr(args, "verbose", False),
        strict=getattr(args, "strict", False),
        write_config=getattr(args, "write_config", None),
    )
