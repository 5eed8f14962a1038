from __future__ import annotations

import argparse
import os
import sys
from typing import Sequence

from casync import __version__
from casync.cli.sync import plan_command, sync_command
from casync.cli.validate import validate_command
from casync.config.settings import DEFAULT_MANAGED_PREFIX
from casync.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="casync",
        description="Reconcile conditional access policy definitions with Microsoft Graph",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        help="Log level (default: $LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "console"],
        default="json",
        help="Structured log output format",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync", help="Create, update and remove policies, then send the run notification"
    )
    plan_parser = subparsers.add_parser("plan", help="Show what sync would change")
    for sub in (sync_parser, plan_parser):
        sub.add_argument("--policies-dir", help="Definitions directory (default: $POLICIES_DIR)")
        sub.add_argument("--prefix", help="Managed name prefix (default: $MANAGED_PREFIX)")

    validate_parser = subparsers.add_parser(
        "validate", help="Check definitions follow the managed naming convention"
    )
    validate_parser.add_argument(
        "--policies-dir",
        default=os.environ.get("POLICIES_DIR", "policies"),
        help="Definitions directory",
    )
    validate_parser.add_argument(
        "--prefix",
        default=os.environ.get("MANAGED_PREFIX", DEFAULT_MANAGED_PREFIX),
        help="Managed name prefix",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper(), json_output=args.log_format == "json")

    if args.command == "sync":
        code = sync_command(policies_dir=args.policies_dir, prefix=args.prefix)
    elif args.command == "plan":
        code = plan_command(policies_dir=args.policies_dir, prefix=args.prefix)
    else:
        code = validate_command(policies_dir=args.policies_dir, prefix=args.prefix)
    sys.exit(int(code))


if __name__ == "__main__":
    main()
