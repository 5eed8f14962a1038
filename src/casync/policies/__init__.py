"""
Policy reconciliation pipeline: load, reconcile, apply, report.
"""

from casync.policies.applier import PolicyApplier, record_load_failures
from casync.policies.loader import LoadResult, load_definitions, parse_definition
from casync.policies.models import (
    CreateDecision,
    DeleteDecision,
    ItemResult,
    PolicyDefinition,
    PolicyState,
    RemotePolicy,
    ResultAction,
    RunSummary,
    UpdateDecision,
)
from casync.policies.reconciler import ReconciliationPlan, reconcile
from casync.policies.reporter import RunContext, build_notification, report
from casync.policies.validation import NamingViolation, check_naming

__all__ = [
    "CreateDecision",
    "DeleteDecision",
    "ItemResult",
    "LoadResult",
    "NamingViolation",
    "PolicyApplier",
    "PolicyDefinition",
    "PolicyState",
    "ReconciliationPlan",
    "RemotePolicy",
    "ResultAction",
    "RunContext",
    "RunSummary",
    "UpdateDecision",
    "build_notification",
    "check_naming",
    "load_definitions",
    "parse_definition",
    "reconcile",
    "record_load_failures",
]
