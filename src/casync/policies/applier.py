"""
Apply reconciliation decisions against the remote service.

Each decision is executed once; a failure is recorded and the next decision
still runs. Nothing is rolled back.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Protocol

import structlog

from casync.clients.base import HTTPRequestError
from casync.core.errors import DefinitionError
from casync.policies.models import (
    CreateDecision,
    Decision,
    DeleteDecision,
    ItemResult,
    ResultAction,
    RunSummary,
    UpdateDecision,
)
from casync.policies.reconciler import ReconciliationPlan

logger = structlog.get_logger()

ResultCallback = Callable[[ItemResult], None]


class PolicyWriter(Protocol):
    def create_policy(self, payload: dict[str, Any]) -> dict[str, Any]: ...

    def update_policy(self, policy_id: str, payload: dict[str, Any]) -> None: ...

    def delete_policy(self, policy_id: str) -> None: ...


def record_load_failures(
    failures: Iterable[DefinitionError],
    summary: RunSummary,
    on_result: ResultCallback | None = None,
) -> None:
    """Count every rejected definition file as a failed item."""
    for failure in failures:
        result = ItemResult(ResultAction.FAILED_TO_LOAD, failure.path.name, failure.message)
        summary.record(result)
        if on_result:
            on_result(result)


class PolicyApplier:
    def __init__(self, client: PolicyWriter, on_result: ResultCallback | None = None) -> None:
        self._client = client
        self._on_result = on_result

    def apply(self, plan: ReconciliationPlan, summary: RunSummary | None = None) -> RunSummary:
        """Execute deletes, then creates and updates, in plan order."""
        summary = summary if summary is not None else RunSummary()
        for decision in plan.decisions:
            result = self._apply_one(decision)
            summary.record(result)
            if self._on_result:
                self._on_result(result)
        logger.info(
            "plan_applied",
            created=summary.created,
            updated=summary.updated,
            removed=summary.removed,
            failed=summary.failed,
        )
        return summary

    def _apply_one(self, decision: Decision) -> ItemResult:
        if isinstance(decision, DeleteDecision):
            return self._delete(decision)
        if isinstance(decision, UpdateDecision):
            return self._update(decision)
        return self._create(decision)

    def _delete(self, decision: DeleteDecision) -> ItemResult:
        try:
            self._client.delete_policy(decision.remote_id)
        except HTTPRequestError as exc:
            logger.error(
                "policy_remove_failed",
                name=decision.name,
                policy_id=decision.remote_id,
                error=str(exc),
            )
            return ItemResult(ResultAction.FAILED_TO_REMOVE, decision.name, str(exc))
        logger.info("policy_removed", name=decision.name, policy_id=decision.remote_id)
        return ItemResult(ResultAction.REMOVED, decision.name)

    def _create(self, decision: CreateDecision) -> ItemResult:
        try:
            created = self._client.create_policy(decision.definition.to_payload())
        except HTTPRequestError as exc:
            logger.error("policy_create_failed", name=decision.name, error=str(exc))
            return ItemResult(ResultAction.FAILED_TO_CREATE, decision.name, str(exc))
        logger.info("policy_created", name=decision.name, policy_id=created.get("id"))
        return ItemResult(ResultAction.CREATED, decision.name)

    def _update(self, decision: UpdateDecision) -> ItemResult:
        try:
            self._client.update_policy(decision.remote_id, decision.definition.to_payload())
        except HTTPRequestError as exc:
            logger.error(
                "policy_update_failed",
                name=decision.name,
                policy_id=decision.remote_id,
                error=str(exc),
            )
            return ItemResult(ResultAction.FAILED_TO_UPDATE, decision.name, str(exc))
        logger.info("policy_updated", name=decision.name, policy_id=decision.remote_id)
        return ItemResult(ResultAction.UPDATED, decision.name)
