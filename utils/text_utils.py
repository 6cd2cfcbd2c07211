"""
Text utilities for product codes and supplier names.
"""

from typing import Optional


def normalize_code(code: Optional[str]) -> str:
    """
    Normalize a product code for comparison.

    - "  ab-12 " → "AB-12"
    - None / whitespace → ""

    Args:
        code: Code as typed or parsed

    Returns:
        Trimmed uppercase code, empty string when there is none
    """
    if not code:
        return ""
    return code.strip().upper()


def invoice_slug(name: str) -> str:
    """
    Supplier name as used inside generated invoice numbers.

    "Plata Sur" → "PLATA-SUR"
    """
    return name.strip().upper().replace(" ", "-")


def name_prefix(name: Optional[str], default: str, length: int = 2) -> str:
    """First letters of a name, uppercased, or the default when empty."""
    if not name or not name.strip():
        return default
    return name.strip()[:length].upper()

