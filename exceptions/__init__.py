"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    ExternalServiceError,

    # Wizard
    WizardSessionNotFoundError,
    ImportSourceDisabledError,
    StepBlockedError,
    InvalidMarginError,
    RowNotFoundError,
    DuplicateCodesError,

    # Catalog API
    CatalogAPIError,
    SessionExpiredError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "ExternalServiceError",

    # Wizard
    "WizardSessionNotFoundError",
    "ImportSourceDisabledError",
    "StepBlockedError",
    "InvalidMarginError",
    "RowNotFoundError",
    "DuplicateCodesError",

    # Catalog API
    "CatalogAPIError",
    "SessionExpiredError",
]
