"""
Custom exception classes for the application.

Every error carries a stable code, a human-readable message and the HTTP
status the API answers with.
"""

from typing import Optional, Any
from datetime import datetime


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "WIZARD_SESSION_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.utcnow().isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 503
    ):
        super().__init__(
            code=f"{service.upper()}_ERROR",
            message=message,
            status_code=status_code,
            details={"service": service, **(details or {})}
        )


# ===================
# WIZARD ERRORS
# ===================

class WizardSessionNotFoundError(NotFoundError):
    """Wizard session unknown or expired."""

    def __init__(self, session_id: str):
        super().__init__(
            resource="Wizard session",
            identifier=session_id,
            code="WIZARD_SESSION_NOT_FOUND"
        )


class ImportSourceDisabledError(ValidationError):
    """Source exists but cannot be selected."""

    def __init__(self, source_id: str):
        super().__init__(
            code="IMPORT_SOURCE_DISABLED",
            message=f"Import source {source_id} is not available",
            details={"source": source_id}
        )


class StepBlockedError(ValidationError):
    """Wizard cannot move past the current step."""

    def __init__(self, step: int, reason: str):
        super().__init__(
            code="WIZARD_STEP_BLOCKED",
            message=reason,
            details={"step": step}
        )


class InvalidMarginError(ValidationError):
    """Margin multiplier outside the allowed range."""

    def __init__(self, multiplier: float, minimum: float, maximum: float):
        super().__init__(
            code="INVALID_MARGIN",
            message=f"Margin must be between {minimum:g} and {maximum:g}",
            details={"provided": multiplier, "min": minimum, "max": maximum}
        )


class RowNotFoundError(NotFoundError):
    """Row index outside the current batch."""

    def __init__(self, index: int):
        super().__init__(
            resource="Import row",
            identifier=str(index),
            code="IMPORT_ROW_NOT_FOUND"
        )


class DuplicateCodesError(ConflictError):
    """Several selected rows share a code."""

    def __init__(self, codes: list[str]):
        super().__init__(
            code="IMPORT_DUPLICATE_CODES",
            message=f"{len(codes)} code(s) appear more than once in the selection",
            details={"codes": sorted(codes)}
        )


# ===================
# CATALOG API ERRORS
# ===================

class CatalogAPIError(ExternalServiceError):
    """Back-office API call failed."""

    def __init__(
        self,
        message: str,
        http_status: Optional[int] = None,
        path: Optional[str] = None
    ):
        super().__init__(
            service="catalog_api",
            message=message,
            details={"http_status": http_status, "path": path}
        )
        self.http_status = http_status


class SessionExpiredError(CatalogAPIError):
    """API rejected the bearer token (401)."""

    def __init__(self, message: str = "Sesión expirada", path: Optional[str] = None):
        super().__init__(message=message, http_status=401, path=path)
        self.code = "SESSION_EXPIRED"
        self.status_code = 401
