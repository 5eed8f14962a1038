"""
OAuth2 client-credential exchange against the Microsoft identity platform.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import structlog
from pydantic import SecretStr

from casync.clients.base import BaseHTTPClient, HTTPRequestError
from casync.core.errors import AuthenticationError

logger = structlog.get_logger()

GRAPH_DEFAULT_SCOPE = "https://graph.microsoft.com/.default"


@dataclass(frozen=True)
class AccessToken:
    """Bearer token issued for one run."""

    token: str
    expires_at: float
    token_type: str = "Bearer"

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.token}"


class ClientCredentialAuthenticator(BaseHTTPClient):
    """Exchanges an app registration's client id and secret for a Graph token."""

    def __init__(
        self,
        *,
        base_url: str = "https://login.microsoftonline.com",
        scope: str = GRAPH_DEFAULT_SCOPE,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(base_url, timeout=timeout)
        self._scope = scope

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}

    def authenticate(
        self,
        client_id: str,
        client_secret: str | SecretStr,
        tenant_id: str,
    ) -> AccessToken:
        """
        Request an access token.

        Raises:
            AuthenticationError: on any failure; there is no fallback.
        """
        if isinstance(client_secret, SecretStr):
            client_secret = client_secret.get_secret_value()
        if not (client_id and client_secret and tenant_id):
            raise AuthenticationError("Client id, client secret and tenant id are all required")

        logger.info("authenticating", tenant_id=tenant_id, client_id=client_id)
        try:
            body = self._request(
                "POST",
                f"/{tenant_id}/oauth2/v2.0/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": client_id,
                    "client_secret": client_secret,
                    "scope": self._scope,
                },
            )
        except HTTPRequestError as exc:
            raise AuthenticationError(
                f"Client credential exchange failed: {exc}",
                {"tenant_id": tenant_id, "status": exc.status_code},
            ) from exc

        token = body.get("access_token")
        if not token:
            raise AuthenticationError(
                "Token response did not contain an access token", {"tenant_id": tenant_id}
            )

        expires_in = float(body.get("expires_in", 3600))
        logger.info("authenticated", tenant_id=tenant_id, expires_in=expires_in)
        return AccessToken(
            token=token,
            expires_at=time.time() + expires_in,
            token_type=body.get("token_type", "Bearer"),
        )
