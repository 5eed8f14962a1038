"""
One-shot reconciliation job.

Loader -> authenticate -> fetch -> reconcile -> apply -> report, strictly in
sequence. Authentication failure aborts before any decision is made; every
other failure is recorded per item and the run carries on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import structlog

from casync.clients.auth import AccessToken, ClientCredentialAuthenticator
from casync.clients.graph import GraphPolicyClient
from casync.clients.ntfy import NtfyNotifier
from casync.config.settings import Settings
from casync.policies.applier import PolicyApplier, ResultCallback, record_load_failures
from casync.policies.loader import LoadResult, load_definitions
from casync.policies.models import RemotePolicy, RunSummary
from casync.policies.reconciler import ReconciliationPlan, reconcile
from casync.policies.reporter import RunContext, report

logger = structlog.get_logger()


class PolicyClient(Protocol):
    def list_policies(self) -> list[dict[str, Any]]: ...

    def create_policy(self, payload: dict[str, Any]) -> dict[str, Any]: ...

    def update_policy(self, policy_id: str, payload: dict[str, Any]) -> None: ...

    def delete_policy(self, policy_id: str) -> None: ...


ClientFactory = Callable[[AccessToken], PolicyClient]


@dataclass
class PlanOutcome:
    loaded: LoadResult
    remote: list[RemotePolicy]
    plan: ReconciliationPlan


@dataclass
class PolicySyncJob:
    settings: Settings
    authenticator: ClientCredentialAuthenticator | None = None
    client_factory: ClientFactory | None = None
    notifier: NtfyNotifier | None = None
    on_result: ResultCallback | None = None
    _client: PolicyClient | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.authenticator is None:
            self.authenticator = ClientCredentialAuthenticator(
                base_url=self.settings.login_base_url,
                timeout=self.settings.http_timeout,
            )
        if self.client_factory is None:
            self.client_factory = self._graph_client
        if self.notifier is None:
            self.notifier = NtfyNotifier(self.settings.ntfy_url)

    def _graph_client(self, token: AccessToken) -> GraphPolicyClient:
        return GraphPolicyClient(
            token,
            base_url=self.settings.graph_base_url,
            timeout=self.settings.http_timeout,
        )

    def _connect(self) -> PolicyClient:
        assert self.authenticator is not None and self.client_factory is not None
        token = self.authenticator.authenticate(
            self.settings.azure_client_id,
            self.settings.azure_client_secret,
            self.settings.azure_tenant_id,
        )
        return self.client_factory(token)

    def plan(self) -> PlanOutcome:
        """Load definitions, fetch remote state, and decide. Nothing is changed."""
        loaded = load_definitions(self.settings.policies_dir)
        self._client = self._connect()
        remote = [RemotePolicy.model_validate(raw) for raw in self._client.list_policies()]
        logger.info("remote_policies_fetched", count=len(remote))
        plan = reconcile(remote, loaded.definitions, self.settings.managed_prefix)
        return PlanOutcome(loaded=loaded, remote=remote, plan=plan)

    def run(self) -> RunSummary:
        """Reconcile and report. Returns the frozen summary."""
        outcome = self.plan()
        assert self._client is not None and self.notifier is not None

        summary = RunSummary()
        record_load_failures(outcome.loaded.failures, summary, self.on_result)
        PolicyApplier(self._client, on_result=self.on_result).apply(outcome.plan, summary)

        context = RunContext(
            workflow_name=self.settings.workflow_name,
            run_id=self.settings.run_id,
        )
        report(summary, context, self.notifier)
        logger.info(
            "sync_completed",
            created=summary.created,
            updated=summary.updated,
            removed=summary.removed,
            failed=summary.failed,
        )
        return summary
