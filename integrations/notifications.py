"""
Toast notification surface.

Operations push toasts here; the route returns them with the response and
the client renders them. Nothing in here decides how a toast looks.
"""

from typing import Optional
import structlog

from config import settings
from exceptions import AppError
from integrations.messages import get_message
from models.notification import Notification, Severity

logger = structlog.get_logger(__name__)


class Notifier:
    """Collects the toasts produced while handling one request."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def add(
        self,
        severity: Severity,
        summary: str,
        detail: str,
        life: Optional[int] = None
    ) -> Notification:
        notification = Notification(
            severity=severity,
            summary=summary,
            detail=detail,
            life=life or settings.toast_life_ms
        )
        self.notifications.append(notification)
        logger.debug(
            "toast_added",
            severity=severity.value,
            summary=summary
        )
        return notification

    def success(self, summary: str, detail: str, life: Optional[int] = None) -> Notification:
        return self.add(Severity.SUCCESS, summary, detail, life or settings.toast_success_life_ms)

    def info(self, summary: str, detail: str, life: Optional[int] = None) -> Notification:
        return self.add(Severity.INFO, summary, detail, life)

    def warn(self, summary: str, detail: str, life: Optional[int] = None) -> Notification:
        return self.add(Severity.WARN, summary, detail, life)

    def error(self, exc: Exception, life: Optional[int] = None) -> Notification:
        """Turn a failed call into an error toast."""
        return self.add(
            Severity.ERROR,
            get_message("summary_error"),
            error_detail(exc),
            life
        )

    def drain(self) -> list[Notification]:
        """Return and forget the collected toasts."""
        notifications, self.notifications = self.notifications, []
        return notifications


def error_detail(exc: Exception) -> str:
    """Message of the exception, or the generic fallback when it has none."""
    if isinstance(exc, AppError) and exc.message:
        return exc.message
    message = str(exc).strip()
    return message or get_message("error_generic")
