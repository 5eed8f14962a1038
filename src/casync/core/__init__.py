"""Core error handling shared by every casync command."""

from casync.core.errors import (
    AuthenticationError,
    CaSyncError,
    ConfigurationError,
    DefinitionError,
    DefinitionParseError,
    DefinitionSchemaError,
    DuplicateDefinitionError,
    ExitCode,
    ValidationError,
    main_with_error_handling,
)

__all__ = [
    "AuthenticationError",
    "CaSyncError",
    "ConfigurationError",
    "DefinitionError",
    "DefinitionParseError",
    "DefinitionSchemaError",
    "DuplicateDefinitionError",
    "ExitCode",
    "ValidationError",
    "main_with_error_handling",
]
