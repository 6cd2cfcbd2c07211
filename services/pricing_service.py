"""
Pricing rules: margin multipliers for imported rows.

Money is computed with Decimal and rounded half-up to cents, then handed
back as float because the API speaks JSON numbers.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence
import structlog

from config import settings
from exceptions import InvalidMarginError
from models.import_wizard import ProductToImport

logger = structlog.get_logger(__name__)

CENTS = Decimal("0.01")


def _to_decimal(value: float) -> Decimal:
    # str() keeps 12.345 as 12.345 instead of its binary expansion
    return Decimal(str(value))


def round_to_cents(value: float) -> float:
    """
    Round an amount to cents, half-up.

    12.345 → 12.35, 24.690 → 24.69
    """
    return float(_to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def price_from_cost(cost_price: float, multiplier: float) -> float:
    """
    Suggested price: cost × multiplier rounded to cents.

    Works on the decimal text of both numbers, so 1.005 × 1 → 1.01.
    Rounding the binary float product (round(c * m * 100) / 100) would
    give 1.00 there, since 1.005 is stored as 1.00499999...
    """
    return float(
        (_to_decimal(cost_price) * _to_decimal(multiplier)).quantize(CENTS, rounding=ROUND_HALF_UP)
    )


def validate_multiplier(multiplier: float) -> float:
    """
    Check a margin multiplier.

    Preset multipliers are always accepted; custom ones must lie within
    [custom_margin_min, custom_margin_max].

    Raises:
        InvalidMarginError: multiplier out of range
    """
    if multiplier in settings.margin_presets:
        return multiplier
    if not settings.custom_margin_min <= multiplier <= settings.custom_margin_max:
        raise InvalidMarginError(
            multiplier,
            settings.custom_margin_min,
            settings.custom_margin_max
        )
    return multiplier


def apply_margin(
    rows: Sequence[ProductToImport],
    multiplier: float
) -> tuple[ProductToImport, ...]:
    """
    Price every selected row that is not yet in the catalog.

    Retail and wholesale both become cost × multiplier rounded to cents.
    Existing rows (stock additions) and deselected rows keep their prices.

    Raises:
        InvalidMarginError: multiplier out of range
    """
    validate_multiplier(multiplier)

    priced = 0
    updated = []
    for row in rows:
        if row.selected and not row.exists:
            price = price_from_cost(row.cost_price, multiplier)
            updated.append(row.model_copy(update={
                "price_retail": price,
                "price_wholesale": price,
            }))
            priced += 1
        else:
            updated.append(row)

    logger.info("margin_applied", multiplier=multiplier, rows_priced=priced)
    return tuple(updated)
