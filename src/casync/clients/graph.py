"""
Microsoft Graph client for conditional access policies.
"""

from __future__ import annotations

from typing import Any

import structlog

from casync.clients.auth import AccessToken
from casync.clients.base import BaseHTTPClient, HTTPRequestError

logger = structlog.get_logger()

POLICIES_PATH = "/identity/conditionalAccess/policies"


class GraphRequestError(HTTPRequestError):
    """A Graph API call failed."""


class GraphPolicyClient(BaseHTTPClient):
    """List, create, update and delete conditional access policies."""

    error_class = GraphRequestError

    def __init__(
        self,
        token: AccessToken,
        *,
        base_url: str = "https://graph.microsoft.com/v1.0",
        timeout: float = 30.0,
    ) -> None:
        super().__init__(base_url, timeout=timeout)
        self._token = token

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": self._token.authorization,
        }

    def list_policies(self) -> list[dict[str, Any]]:
        """Return every policy in the tenant, following @odata.nextLink pages."""
        policies: list[dict[str, Any]] = []
        next_url: str | None = POLICIES_PATH
        while next_url:
            page = self.get(next_url)
            policies.extend(page.get("value", []))
            next_url = page.get("@odata.nextLink")
        logger.info("policies_listed", count=len(policies))
        return policies

    def create_policy(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self.post(POLICIES_PATH, json=payload)

    def update_policy(self, policy_id: str, payload: dict[str, Any]) -> None:
        self.patch(f"{POLICIES_PATH}/{policy_id}", json=payload)

    def delete_policy(self, policy_id: str) -> None:
        self.delete(f"{POLICIES_PATH}/{policy_id}")
