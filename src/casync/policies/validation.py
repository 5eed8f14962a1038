"""
Naming convention check run before deployment.

Every definition file must parse and its name must start with the managed
prefix, otherwise the reconciler would create policies it can never delete.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from casync.core.errors import DefinitionError
from casync.policies.loader import DEFINITION_EXTENSION, definition_files, parse_definition

logger = structlog.get_logger()


@dataclass(frozen=True)
class NamingViolation:
    file: str
    message: str


def check_naming(
    directory: Path, prefix: str, extension: str = DEFINITION_EXTENSION
) -> list[NamingViolation]:
    violations: list[NamingViolation] = []
    seen: dict[str, str] = {}
    for path in definition_files(directory, extension):
        try:
            definition = parse_definition(path)
        except DefinitionError as exc:
            violations.append(NamingViolation(path.name, exc.message))
            continue
        if not definition.name.startswith(prefix):
            violations.append(
                NamingViolation(path.name, f"'{definition.name}' does not start with '{prefix}'")
            )
        elif definition.name in seen:
            violations.append(
                NamingViolation(
                    path.name, f"'{definition.name}' is already defined in {seen[definition.name]}"
                )
            )
        else:
            seen[definition.name] = path.name

    logger.info("naming_checked", directory=str(directory), violations=len(violations))
    return violations
