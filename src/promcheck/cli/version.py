"""
CLI command printing the installed version.
"""

from __future__ import annotations

import argparse

from promcheck import __version__
from promcheck.cli.ux import console


def version_command() -> int:
    console.print(f"promcheck {__version__}", markup=False)
    return 0


def register_version_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register version subcommand parser."""
    subparsers.add_parser("version", help="Print the promcheck version")


def handle_version_command(args: argparse.Namespace) -> int:
    return version_command()
