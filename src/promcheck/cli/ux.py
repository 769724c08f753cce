"""
CLI UX utilities using Charm tools (gum) with Python fallbacks.

Best UX when gum is installed, always works via pip: rich for output and
questionary for prompts.

Environment handling:
- Detects TTY vs pipe/CI
- Respects NO_COLOR and FORCE_COLOR environment variables
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import questionary
from questionary import Style as QStyle
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.theme import Theme

PROMCHECK_THEME = Theme(
    {
        "info": "#88C0D0",
        "success": "#A3BE8C",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "muted": "#D8DEE9",
    }
)


def _is_interactive() -> bool:
    """Check if we're in an interactive terminal environment."""
    ci_vars = ["CI", "GITHUB_ACTIONS", "JENKINS_URL", "GITLAB_CI", "CIRCLECI", "TRAVIS"]
    if any(os.environ.get(var) for var in ci_vars):
        return False
    return sys.stdin.isatty() and sys.stdout.isatty()


console = Console(
    theme=PROMCHECK_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
    highlight=False,
)

PROMPT_STYLE = QStyle(
    [
        ("qmark", "fg:#88C0D0 bold"),
        ("question", "bold"),
        ("answer", "fg:#A3BE8C"),
    ]
)


def has_gum() -> bool:
    """Check if gum is available in PATH."""
    return shutil.which("gum") is not None


def _run_gum(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """Run gum command with given arguments."""
    return subprocess.run(["gum", *args], **kwargs)


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a spinner while work is in progress."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description=message, total=None)
        yield


# === Output Formatting ===


def success(message: str) -> None:
    """Print a success message."""
    if has_gum():
        _run_gum(["style", "--foreground", "10", f"✓ {message}"])
    else:
        console.print(f"[success]✓ {message}[/success]")


def error(message: str) -> None:
    """Print an error message."""
    if has_gum():
        _run_gum(["style", "--foreground", "9", f"✗ {message}"])
    else:
        console.print(f"[error]✗ {message}[/error]")


def warning(message: str) -> None:
    """Print a warning message."""
    if has_gum():
        _run_gum(["style", "--foreground", "11", f"⚠ {message}"])
    else:
        console.print(f"[warning]⚠ {message}[/warning]")


def info(message: str) -> None:
    """Print an info message."""
    if has_gum():
        _run_gum(["style", "--foreground", "14", f"ℹ {message}"])
    else:
        console.print(f"[info]ℹ {message}[/info]")


# === Interactive Prompts ===


def text_input(message: str, default: str = "") -> str:
    """Get text input from user."""
    if has_gum():
        result = _run_gum(
            ["input", "--placeholder", message, "--value", default],
            capture_output=True,
            text=True,
        )
        return result.stdout.strip() if result.returncode == 0 else default
    return (questionary.text(message, default=default, style=PROMPT_STYLE).ask() or default).strip()


def password_input(message: str) -> str:
    """Get password/secret input (hidden)."""
    if has_gum():
        result = _run_gum(
            ["input", "--password", "--placeholder", message],
            capture_output=True,
            text=True,
        )
        return result.stdout.strip() if result.returncode == 0 else ""
    return questionary.password(message, style=PROMPT_STYLE).ask() or ""


def is_interactive() -> bool:
    """Public function to check if running interactively."""
    return _is_interactive()
