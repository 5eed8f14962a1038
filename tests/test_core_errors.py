"""Tests for core/errors.py."""

from unittest.mock import patch

from casync.core.errors import (
    AuthenticationError,
    ConfigurationError,
    ExitCode,
    format_error_message,
    main_with_error_handling,
)


def test_casync_error_maps_to_exit_code():
    @main_with_error_handling()
    def command() -> int:
        raise AuthenticationError("token request failed", {"tenant_id": "t"})

    assert command() == ExitCode.AUTH_ERROR


def test_unexpected_error_maps_to_unknown():
    @main_with_error_handling()
    def command() -> int:
        raise RuntimeError("boom")

    assert command() == ExitCode.UNKNOWN_ERROR


def test_keyboard_interrupt():
    @main_with_error_handling()
    def command() -> int:
        raise KeyboardInterrupt

    assert command() == 130


def test_success_passthrough():
    @main_with_error_handling()
    def command() -> int:
        return ExitCode.SUCCESS

    assert command() == 0


def test_format_error_message_with_details():
    error = ConfigurationError("Environment configuration is incomplete", {"missing": "RUN_ID"})

    assert format_error_message(error) == "Environment configuration is incomplete (missing=RUN_ID)"


def test_casync_error_prints_user_facing_line():
    @main_with_error_handling()
    def command() -> int:
        raise ConfigurationError("Environment configuration is incomplete", {"missing": "RUN_ID"})

    with patch("casync.cli.ux.error") as mock_error:
        assert command() == ExitCode.CONFIG_ERROR

    mock_error.assert_called_once_with("Environment configuration is incomplete (missing=RUN_ID)")


def test_unexpected_error_prints_nothing_user_facing():
    @main_with_error_handling()
    def command() -> int:
        raise RuntimeError("boom")

    with patch("casync.cli.ux.error") as mock_error:
        command()

    mock_error.assert_not_called()
