"""
Console output helpers built on rich.

Environment handling:
- Automatically detects TTY vs pipe/CI
- Respects NO_COLOR and FORCE_COLOR environment variables
"""

from __future__ import annotations

import os
import sys

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from casync.policies.models import ItemResult, ResultAction

CASYNC_THEME = Theme(
    {
        "info": "#88C0D0",
        "success": "#A3BE8C",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "muted": "#D8DEE9",
    }
)

RESULT_STYLES = {
    ResultAction.CREATED: "success",
    ResultAction.UPDATED: "success",
    ResultAction.REMOVED: "warning",
}


def _is_interactive() -> bool:
    """Check if we're in an interactive terminal environment."""
    ci_vars = ["CI", "GITHUB_ACTIONS", "JENKINS_URL", "GITLAB_CI", "CIRCLECI", "TRAVIS"]
    if any(os.environ.get(var) for var in ci_vars):
        return False
    return sys.stdout.isatty()


def _should_use_color() -> bool:
    """Check if we should use colored output."""
    # https://no-color.org/
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    return _is_interactive()


def make_console() -> Console:
    """Console honouring NO_COLOR, FORCE_COLOR and CI/TTY detection."""
    use_color = _should_use_color()
    return Console(
        theme=CASYNC_THEME,
        force_terminal=True if use_color and os.environ.get("FORCE_COLOR") else None,
        no_color=not use_color,
        highlight=False,
    )


console = make_console()


def success(message: str) -> None:
    console.print(f"[success]✓ {escape(message)}[/success]")


def error(message: str) -> None:
    console.print(f"[error]✗ {escape(message)}[/error]")


def warning(message: str) -> None:
    console.print(f"[warning]⚠ {escape(message)}[/warning]")


def info(message: str) -> None:
    console.print(f"[info]{escape(message)}[/info]")


def print_result(result: ItemResult) -> None:
    """Print one applied item, coloured by outcome."""
    style = "error" if result.action.failed else RESULT_STYLES.get(result.action, "info")
    console.print(result.line, style=style, markup=False)
