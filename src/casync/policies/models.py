"""
Data models for policy reconciliation.

- PolicyDefinition: desired state, parsed from a definition file
- RemotePolicy: actual state, as returned by Graph
- Create/Update/Delete decisions produced by the reconciler
- RunSummary: counters and ordered result lines built by the applier
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class PolicyState(StrEnum):
    """Activation mode of a conditional access policy."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    REPORT_ONLY = "enabledForReportingButNotEnforced"


class PolicyDefinition(BaseModel):
    """Desired policy state. Only the fields sent to Graph are kept."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    name: str = Field(alias="displayName", min_length=1)
    conditions: dict[str, Any]
    grant_controls: dict[str, Any] | None = Field(alias="grantControls")
    session_controls: dict[str, Any] | None = Field(alias="sessionControls")
    state: PolicyState

    def to_payload(self) -> dict[str, Any]:
        """Body for create and update calls. Never carries a remote id."""
        return {
            "displayName": self.name,
            "conditions": self.conditions,
            "grantControls": self.grant_controls,
            "sessionControls": self.session_controls,
            "state": self.state.value,
        }


class RemotePolicy(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str
    name: str = Field(alias="displayName")


@dataclass(frozen=True)
class CreateDecision:
    definition: PolicyDefinition

    @property
    def name(self) -> str:
        return self.definition.name


@dataclass(frozen=True)
class UpdateDecision:
    definition: PolicyDefinition
    remote_id: str

    @property
    def name(self) -> str:
        return self.definition.name


@dataclass(frozen=True)
class DeleteDecision:
    remote_id: str
    name: str


Decision = Union[CreateDecision, UpdateDecision, DeleteDecision]


class ResultAction(Enum):
    """Outcome label of one processed item, one success/failure pair per operation."""

    CREATED = "CREATED"
    UPDATED = "UPDATED"
    REMOVED = "REMOVED"
    FAILED_TO_CREATE = "FAILED TO CREATE"
    FAILED_TO_UPDATE = "FAILED TO UPDATE"
    FAILED_TO_REMOVE = "FAILED TO REMOVE"
    FAILED_TO_LOAD = "FAILED TO LOAD"

    @property
    def failed(self) -> bool:
        return self.value.startswith("FAILED")


@dataclass(frozen=True)
class ItemResult:
    action: ResultAction
    name: str
    detail: str | None = None

    @property
    def line(self) -> str:
        text = f"{self.action.value}: {self.name}"
        if self.detail:
            text = f"{text} - {self.detail}"
        return text


class SummaryFrozenError(RuntimeError):
    """Raised when recording into a summary that has been handed to the reporter."""


@dataclass
class RunSummary:
    """Counters plus the ordered per-item results of one run."""

    created: int = 0
    updated: int = 0
    removed: int = 0
    failed: int = 0
    _results: list[ItemResult] = field(default_factory=list, repr=False)
    _frozen: bool = field(default=False, repr=False)

    def record(self, result: ItemResult) -> None:
        if self._frozen:
            raise SummaryFrozenError("Run summary is frozen")
        if result.action.failed:
            self.failed += 1
        elif result.action is ResultAction.CREATED:
            self.created += 1
        elif result.action is ResultAction.UPDATED:
            self.updated += 1
        else:
            self.removed += 1
        self._results.append(result)

    def freeze(self) -> "RunSummary":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def results(self) -> tuple[ItemResult, ...]:
        return tuple(self._results)

    @property
    def lines(self) -> list[str]:
        return [result.line for result in self._results]

    @property
    def total(self) -> int:
        return self.created + self.updated + self.removed + self.failed

    @property
    def has_failures(self) -> bool:
        return self.failed > 0
