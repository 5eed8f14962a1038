"""
CLI commands for casync.
"""

from casync.cli.sync import plan_command, sync_command
from casync.cli.validate import validate_command

__all__ = ["plan_command", "sync_command", "validate_command"]
