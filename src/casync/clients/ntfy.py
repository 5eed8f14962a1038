"""
Notification sink for run summaries (ntfy-style HTTP topic).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from casync.clients.base import BaseHTTPClient, HTTPRequestError

logger = structlog.get_logger()


class NotificationError(Exception):
    """Raised when notification fails."""


class Priority(str, Enum):
    DEFAULT = "default"
    HIGH = "high"


class Tag(str, Enum):
    SUCCESS = "white_check_mark"
    WARNING = "warning"


@dataclass(frozen=True)
class Notification:
    title: str
    priority: Priority
    tags: Tag
    body: str


class NtfyNotifier(BaseHTTPClient):
    """POST a plain-text message with Title/Priority/Tags headers."""

    def __init__(self, url: str, *, timeout: float = 10.0) -> None:
        super().__init__(url, timeout=timeout)
        self.url = url

    def _headers(self) -> dict[str, str]:
        return {"Content-Type": "text/plain; charset=utf-8"}

    def send(self, notification: Notification) -> None:
        """
        Send the notification.

        Raises:
            NotificationError: If sending fails
        """
        logger.info(
            "sending_notification",
            title=notification.title,
            priority=notification.priority.value,
        )
        try:
            self._send(
                "POST",
                self.url,
                content=notification.body.encode("utf-8"),
                headers={
                    "Title": notification.title,
                    "Priority": notification.priority.value,
                    "Tags": notification.tags.value,
                },
            )
        except HTTPRequestError as exc:
            raise NotificationError(f"Failed to send notification: {exc}") from exc
        logger.info("notification_sent", title=notification.title)
