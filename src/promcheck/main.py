"""
promcheck command line entry point.

Usage:
    promcheck check [options]
    promcheck version
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from promcheck.cli.check import handle_check_command, register_check_parser
from promcheck.cli.version import handle_version_command, register_version_parser
from promcheck.config.settings import get_settings
from promcheck.logging import configure_logging

HANDLERS = {
    "check": handle_check_command,
    "version": handle_version_command,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promcheck",
        description="Validate that Prometheus exposes the metrics the Kubernetes collector needs",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level for diagnostics on stderr (default: PROMCHECK_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    subparsers = parser.add_subparsers(dest="command")

    register_check_parser(subparsers)
    register_version_parser(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    configure_logging(
        args.log_level or settings.log_level,
        json_logs=args.json_logs or settings.json_logs,
    )

    sys.exit(HANDLERS[args.command](args))


if __name__ == "__main__":
    main()
