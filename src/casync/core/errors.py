"""
Unified error handling for casync commands.

This module provides the error taxonomy, exit codes, and error reporting
shared by every CLI command.

Exit Codes:
- 0: Success (per-item apply failures still exit 0)
- 10: Configuration error
- 11: Authentication error (fatal, aborts before reconciliation)
- 12: Validation error (naming convention violations)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from pathlib import Path
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    AUTH_ERROR = 11
    VALIDATION_ERROR = 12
    UNKNOWN_ERROR = 127


class CaSyncError(Exception):
    """Base exception for casync errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CaSyncError):
    """Raised for missing or invalid configuration."""

    exit_code = ExitCode.CONFIG_ERROR


class AuthenticationError(CaSyncError):
    """Raised when the client-credential exchange fails. Always fatal."""

    exit_code = ExitCode.AUTH_ERROR


class ValidationError(CaSyncError):
    """Raised when definitions violate the naming convention."""

    exit_code = ExitCode.VALIDATION_ERROR


class DefinitionError(CaSyncError):
    """A single definition file could not be used. Recoverable per file."""

    kind = "definition"

    def __init__(self, path: Path, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, details)
        self.path = path

    def __str__(self) -> str:
        return f"{self.path.name}: {self.message}"


class DefinitionParseError(DefinitionError):
    """The file is unreadable or not valid JSON."""

    kind = "parse"


class DefinitionSchemaError(DefinitionError):
    """The file parsed but does not match the policy definition schema."""

    kind = "schema"


class DuplicateDefinitionError(DefinitionError):
    """The file declares a name already claimed by an earlier file."""

    kind = "duplicate"


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Exit codes:
        - CaSyncError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except CaSyncError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                _print_error(e)
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.UNKNOWN_ERROR),
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: CaSyncError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg


def _print_error(error: CaSyncError) -> None:
    """Print the user-facing error line."""
    from casync.cli.ux import error as print_error

    print_error(format_error_message(error))
