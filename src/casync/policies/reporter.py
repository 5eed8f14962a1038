"""
Render the run summary and dispatch it to the notification sink.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from casync.clients.ntfy import Notification, NotificationError, NtfyNotifier, Priority, Tag
from casync.policies.models import RunSummary

logger = structlog.get_logger()

TITLE_SUCCESS = "Conditional Access Deployment Successful"
TITLE_ERRORS = "Conditional Access Deployment Completed with Errors"


@dataclass(frozen=True)
class RunContext:
    """Run metadata supplied by the CI scheduler."""

    workflow_name: str
    run_id: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def render_body(summary: RunSummary, context: RunContext) -> str:
    lines = [
        "Conditional Access Policy Deployment",
        f"Time: {context.timestamp.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}",
        f"Workflow: {context.workflow_name}",
        f"Run ID: {context.run_id}",
        "",
        f"Created: {summary.created}",
        f"Updated: {summary.updated}",
        f"Removed: {summary.removed}",
        f"Failed: {summary.failed}",
    ]
    if summary.results:
        lines += ["", "Results:"]
        lines += [f"- {line}" for line in summary.lines]
    return "\n".join(lines)


def build_notification(summary: RunSummary, context: RunContext) -> Notification:
    if summary.has_failures:
        return Notification(
            title=TITLE_ERRORS,
            priority=Priority.HIGH,
            tags=Tag.WARNING,
            body=render_body(summary, context),
        )
    return Notification(
        title=TITLE_SUCCESS,
        priority=Priority.DEFAULT,
        tags=Tag.SUCCESS,
        body=render_body(summary, context),
    )


def send_report(notifier: NtfyNotifier, notification: Notification) -> bool:
    """Send the notification. Delivery failure is logged, never raised."""
    try:
        notifier.send(notification)
    except NotificationError as exc:
        logger.error("notification_failed", error=str(exc))
        return False
    return True


def report(summary: RunSummary, context: RunContext, notifier: NtfyNotifier) -> Notification:
    """Freeze the summary, then render and send it."""
    summary.freeze()
    notification = build_notification(summary, context)
    send_report(notifier, notification)
    return notification
