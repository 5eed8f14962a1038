from casync.clients.auth import AccessToken, ClientCredentialAuthenticator
from casync.clients.base import BaseHTTPClient, HTTPRequestError
from casync.clients.graph import GraphPolicyClient, GraphRequestError
from casync.clients.ntfy import Notification, NotificationError, NtfyNotifier, Priority, Tag

__all__ = [
    "AccessToken",
    "BaseHTTPClient",
    "ClientCredentialAuthenticator",
    "GraphPolicyClient",
    "GraphRequestError",
    "HTTPRequestError",
    "Notification",
    "NotificationError",
    "NtfyNotifier",
    "Priority",
    "Tag",
]
