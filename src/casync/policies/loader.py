"""
Load policy definition files from a directory.

Files are read in lexicographic filename order so duplicate handling is
deterministic: the first file to declare a name keeps it and every later file
declaring the same name is rejected.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from pydantic import ValidationError as PydanticValidationError

from casync.core.errors import (
    ConfigurationError,
    DefinitionError,
    DefinitionParseError,
    DefinitionSchemaError,
    DuplicateDefinitionError,
)
from casync.policies.models import PolicyDefinition

logger = structlog.get_logger()

DEFINITION_EXTENSION = ".json"


@dataclass
class LoadResult:
    definitions: dict[str, PolicyDefinition] = field(default_factory=dict)
    sources: dict[str, Path] = field(default_factory=dict)
    failures: list[DefinitionError] = field(default_factory=list)


def definition_files(directory: Path, extension: str = DEFINITION_EXTENSION) -> list[Path]:
    """Definition files in ``directory``, sorted by filename."""
    if not directory.is_dir():
        raise ConfigurationError(
            "Policy definitions directory not found", {"directory": str(directory)}
        )
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix == extension),
        key=lambda p: p.name,
    )


def _schema_message(exc: PydanticValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err["loc"]) or "<root>"
        problems.append(f"{location}: {err['msg']}")
    return "; ".join(problems)


def parse_definition(path: Path) -> PolicyDefinition:
    """
    Parse a single definition file.

    Raises:
        DefinitionParseError: unreadable file or malformed JSON
        DefinitionSchemaError: JSON that does not describe a policy
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DefinitionParseError(path, str(exc)) from exc

    if not isinstance(raw, dict):
        raise DefinitionSchemaError(path, "top-level value must be an object")

    try:
        return PolicyDefinition.model_validate(raw)
    except PydanticValidationError as exc:
        raise DefinitionSchemaError(path, _schema_message(exc)) from exc


def load_definitions(directory: Path, extension: str = DEFINITION_EXTENSION) -> LoadResult:
    """Parse every definition file into a name-keyed mapping, collecting per-file failures."""
    result = LoadResult()
    for path in definition_files(directory, extension):
        try:
            definition = parse_definition(path)
        except DefinitionError as exc:
            logger.warning("definition_rejected", file=path.name, kind=exc.kind, error=exc.message)
            result.failures.append(exc)
            continue

        if definition.name in result.definitions:
            first = result.sources[definition.name]
            exc = DuplicateDefinitionError(
                path, f"name '{definition.name}' already defined in {first.name}"
            )
            logger.warning("definition_rejected", file=path.name, kind=exc.kind, error=exc.message)
            result.failures.append(exc)
            continue

        result.definitions[definition.name] = definition
        result.sources[definition.name] = path

    logger.info(
        "definitions_loaded",
        directory=str(directory),
        loaded=len(result.definitions),
        rejected=len(result.failures),
    )
    return result
