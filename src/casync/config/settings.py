"""
Application settings using Pydantic.

Run metadata and credentials are supplied by the CI scheduler through the
environment; none of them has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from casync.core.errors import ConfigurationError

DEFAULT_MANAGED_PREFIX = "GH - "


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Azure app registration (client-credential exchange)
    azure_client_id: str
    azure_client_secret: SecretStr
    azure_tenant_id: str

    # Notification sink
    ntfy_url: str

    # Run metadata from the CI scheduler
    workflow_name: str
    run_id: str

    # Definitions
    policies_dir: Path = Path("policies")
    managed_prefix: str = DEFAULT_MANAGED_PREFIX

    # Microsoft endpoints
    graph_base_url: str = "https://graph.microsoft.com/v1.0"
    login_base_url: str = "https://login.microsoftonline.com"

    # HTTP client settings
    http_timeout: float = 30.0


def load_settings(**overrides: Any) -> Settings:
    """Load settings from the environment, with explicit overrides applied on top.

    Raises:
        ConfigurationError: if a required variable is missing or a value is invalid.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**values)
    except PydanticValidationError as exc:
        missing = sorted(
            str(err["loc"][0]).upper() for err in exc.errors() if err["type"] == "missing"
        )
        invalid = sorted(
            str(err["loc"][0]).upper()
            for err in exc.errors()
            if err["type"] != "missing" and err["loc"]
        )
        details: dict[str, Any] = {}
        if missing:
            details["missing"] = ", ".join(missing)
        if invalid:
            details["invalid"] = ", ".join(invalid)
        raise ConfigurationError("Environment configuration is incomplete", details) from exc
