"""
CLI command for the pre-deployment naming convention check.
"""

from __future__ import annotations

from pathlib import Path

from casync.cli.ux import error, success
from casync.config.settings import DEFAULT_MANAGED_PREFIX
from casync.core.errors import ExitCode, ValidationError, main_with_error_handling
from casync.policies.validation import check_naming


@main_with_error_handling()
def validate_command(policies_dir: str = "policies", prefix: str = DEFAULT_MANAGED_PREFIX) -> int:
    """Check every definition parses and carries the managed prefix. Needs no credentials."""
    violations = check_naming(Path(policies_dir), prefix)
    for violation in violations:
        error(f"{violation.file}: {violation.message}")
    if violations:
        raise ValidationError(
            "Policy definitions violate the naming convention",
            {"violations": len(violations)},
        )
    success(f"All definitions in {policies_dir} follow the '{prefix}' naming convention")
    return ExitCode.SUCCESS
