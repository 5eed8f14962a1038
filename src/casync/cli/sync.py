"""
CLI commands that talk to Graph: ``sync`` and ``plan``.
"""

from __future__ import annotations

from pathlib import Path

from casync.cli.ux import console, error, info, print_result, success, warning
from casync.config.settings import load_settings
from casync.core.errors import ExitCode, main_with_error_handling
from casync.logging import bind_context
from casync.policies.models import CreateDecision, DeleteDecision, RunSummary
from casync.sync import PlanOutcome, PolicySyncJob


def print_summary(summary: RunSummary) -> None:
    console.print()
    console.print(
        f"Created: {summary.created}  Updated: {summary.updated}  "
        f"Removed: {summary.removed}  Failed: {summary.failed}"
    )
    if summary.has_failures:
        warning(f"Completed with {summary.failed} failed item(s)")
    else:
        success("Completed successfully")


def print_plan(outcome: PlanOutcome) -> None:
    for failure in outcome.loaded.failures:
        error(f"SKIPPED {failure}")
    if not outcome.plan.has_changes:
        info("No definitions and no managed remote policies")
        return
    for decision in outcome.plan.decisions:
        if isinstance(decision, DeleteDecision):
            console.print(f"- delete  {decision.name} ({decision.remote_id})", style="warning", markup=False)
        elif isinstance(decision, CreateDecision):
            console.print(f"+ create  {decision.name}", style="success", markup=False)
        else:
            console.print(f"~ update  {decision.name} ({decision.remote_id})", style="info", markup=False)
    console.print()
    console.print(
        f"Plan: {len(outcome.plan.creates)} to create, {len(outcome.plan.updates)} to update, "
        f"{len(outcome.plan.deletes)} to remove"
    )


@main_with_error_handling()
def sync_command(policies_dir: str | None = None, prefix: str | None = None) -> int:
    """
    Reconcile definitions with Graph and send the run notification.

    Per-item failures are reported but still exit 0; only configuration or
    authentication failures produce a non-zero exit code.
    """
    settings = load_settings(
        policies_dir=Path(policies_dir) if policies_dir else None,
        managed_prefix=prefix,
    )
    bind_context(workflow=settings.workflow_name, run_id=settings.run_id)

    job = PolicySyncJob(settings, on_result=print_result)
    summary = job.run()
    print_summary(summary)
    return ExitCode.SUCCESS


@main_with_error_handling()
def plan_command(policies_dir: str | None = None, prefix: str | None = None) -> int:
    """Show the decisions a sync would apply, without changing anything."""
    settings = load_settings(
        policies_dir=Path(policies_dir) if policies_dir else None,
        managed_prefix=prefix,
    )
    bind_context(workflow=settings.workflow_name, run_id=settings.run_id)

    outcome = PolicySyncJob(settings).plan()
    print_plan(outcome)
    return ExitCode.SUCCESS
