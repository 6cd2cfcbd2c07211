"""
In-memory storage for import wizard sessions.

One ImportWizardState per session id, expiring after a period of inactivity.
Toasts raised in the background (debounced code checks) wait here until the
next response for that session picks them up.
Single-process only.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

import structlog

from config import settings
from exceptions import WizardSessionNotFoundError
from models.import_wizard import ImportWizardState
from integrations.catalog_api import UploadFile
from models.notification import Notification

logger = structlog.get_logger(__name__)


@dataclass
class WizardSession:
    id: str
    state: ImportWizardState
    expires_at: datetime
    notifications: list[Notification] = field(default_factory=list)
    # last uploaded file, forwarded again on execute for some sources
    upload: Optional[UploadFile] = None


_sessions: dict[str, WizardSession] = {}


def _expiry(ttl_minutes: Optional[int] = None) -> datetime:
    minutes = ttl_minutes or settings.wizard_session_ttl_minutes
    return datetime.now() + timedelta(minutes=minutes)


def create_session(state: ImportWizardState, ttl_minutes: Optional[int] = None) -> WizardSession:
    """Store a new wizard, return its session."""
    session = WizardSession(
        id=str(uuid.uuid4()),
        state=state,
        expires_at=_expiry(ttl_minutes)
    )
    _sessions[session.id] = session
    _cleanup_expired()
    logger.info("wizard_session_created", session_id=session.id)
    return session


def get_session(session_id: str) -> WizardSession:
    """
    Fetch a live session.

    Raises:
        WizardSessionNotFoundError: unknown or expired id
    """
    session = _sessions.get(session_id)
    if session is None:
        raise WizardSessionNotFoundError(session_id)
    if datetime.now() > session.expires_at:
        del _sessions[session_id]
        logger.info("wizard_session_expired", session_id=session_id)
        raise WizardSessionNotFoundError(session_id)
    return session


def save_state(session_id: str, state: ImportWizardState) -> WizardSession:
    """Replace the stored state and push the expiry back."""
    session = get_session(session_id)
    session.state = state
    session.expires_at = _expiry()
    _cleanup_expired()
    return session


def push_notifications(session_id: str, notifications: list[Notification]) -> None:
    session = _sessions.get(session_id)
    if session is not None:
        session.notifications.extend(notifications)


def drain_notifications(session_id: str) -> list[Notification]:
    """Return and forget the toasts waiting on a session."""
    session = get_session(session_id)
    notifications, session.notifications = session.notifications, []
    return notifications


def store_upload(session_id: str, upload: Optional[UploadFile]) -> None:
    get_session(session_id).upload = upload


def delete_session(session_id: str) -> None:
    """Remove a session after the import or on cancel."""
    if _sessions.pop(session_id, None) is not None:
        logger.info("wizard_session_deleted", session_id=session_id)


def clear_sessions() -> None:
    _sessions.clear()


def _cleanup_expired() -> None:
    """Remove all expired sessions."""
    now = datetime.now()
    expired = [k for k, s in _sessions.items() if now > s.expires_at]
    for k in expired:
        del _sessions[k]
