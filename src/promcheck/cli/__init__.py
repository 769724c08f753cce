"""
CLI commands for promcheck.
"""

from promcheck.cli.check import check_command
from promcheck.cli.version import version_command

__all__ = [
    "check_command",
    "version_command",
]
