"""
Decide create/update/delete per policy name.

Only remote policies whose name starts with the managed prefix are eligible
for deletion. Every local definition resolves to an update when a remote
policy with the exact same name exists, otherwise to a create. Lookups use
the list fetched before any change was applied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

import structlog

from casync.policies.models import (
    CreateDecision,
    Decision,
    DeleteDecision,
    PolicyDefinition,
    RemotePolicy,
    UpdateDecision,
)

logger = structlog.get_logger()


@dataclass
class ReconciliationPlan:
    deletes: list[DeleteDecision] = field(default_factory=list)
    upserts: list[CreateDecision | UpdateDecision] = field(default_factory=list)

    @property
    def decisions(self) -> list[Decision]:
        """All deletes first, then creates and updates."""
        return [*self.deletes, *self.upserts]

    @property
    def creates(self) -> list[CreateDecision]:
        return [d for d in self.upserts if isinstance(d, CreateDecision)]

    @property
    def updates(self) -> list[UpdateDecision]:
        return [d for d in self.upserts if isinstance(d, UpdateDecision)]

    @property
    def has_changes(self) -> bool:
        return bool(self.deletes or self.upserts)


def is_managed(name: str, prefix: str) -> bool:
    return name.startswith(prefix)


def reconcile(
    remote: Iterable[RemotePolicy],
    definitions: Mapping[str, PolicyDefinition],
    prefix: str,
) -> ReconciliationPlan:
    """Compute the decisions that align remote state with the definitions."""
    remote = list(remote)
    plan = ReconciliationPlan()

    for policy in remote:
        if is_managed(policy.name, prefix) and policy.name not in definitions:
            plan.deletes.append(DeleteDecision(remote_id=policy.id, name=policy.name))

    # first remote policy with a given name is the update target
    remote_ids: dict[str, str] = {}
    for policy in remote:
        remote_ids.setdefault(policy.name, policy.id)

    for name in sorted(definitions):
        definition = definitions[name]
        remote_id = remote_ids.get(name)
        if remote_id is None:
            plan.upserts.append(CreateDecision(definition))
        else:
            plan.upserts.append(UpdateDecision(definition, remote_id))

    logger.info(
        "reconciliation_planned",
        deletes=len(plan.deletes),
        creates=len(plan.creates),
        updates=len(plan.updates),
    )
    return plan
