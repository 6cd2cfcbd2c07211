"""
Toast notification schema.

The client renders these as transient messages.
"""

from enum import Enum

from models.base import BaseSchema


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class Notification(BaseSchema):
    """One toast: severity, summary line, detail text and display time (ms)."""
    severity: Severity
    summary: str
    detail: str
    life: int = 3000
