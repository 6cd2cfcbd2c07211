"""
Batch reconciliation rules for the import wizard.

Pure functions over an immutable batch of ProductToImport rows:
- status of each row (new / duplicate in batch / exists in catalog)
- applying server-confirmed existing codes
- selection figures and the gate to leave the configure step

Codes are compared after normalize_code (trimmed, uppercase).
"""

from collections import Counter
from typing import Iterable, Sequence

from models.import_wizard import BatchSummary, ProductToImport, RowStatus, RowEdit
from exceptions import RowNotFoundError
from services.pricing_service import round_to_cents
from utils.text_utils import normalize_code


# ===================
# CLASSIFICATION
# ===================

def find_duplicate_codes(rows: Sequence[ProductToImport]) -> set[str]:
    """
    Codes that appear on two or more rows of the batch.

    Empty codes never count as duplicates.
    """
    counts = Counter(normalize_code(row.code) for row in rows)
    return {code for code, count in counts.items() if code and count >= 2}


def classify_row(
    row: ProductToImport,
    duplicate_codes: set[str],
    existing_codes: Iterable[str] = ()
) -> RowStatus:
    """
    Status of one row.

    Order: empty code → NEW; repeated in batch → DUPLICATE_IN_BATCH;
    confirmed by the server → EXISTS_IN_CATALOG; otherwise NEW.
    """
    code = normalize_code(row.code)
    if not code:
        return RowStatus.NEW
    if code in duplicate_codes:
        return RowStatus.DUPLICATE_IN_BATCH
    if code in {normalize_code(c) for c in existing_codes}:
        return RowStatus.EXISTS_IN_CATALOG
    return RowStatus.NEW


def classify_rows(
    rows: Sequence[ProductToImport],
    existing_codes: Iterable[str] = ()
) -> list[RowStatus]:
    """Status of every row, in batch order."""
    duplicates = find_duplicate_codes(rows)
    existing = {normalize_code(c) for c in existing_codes}
    return [classify_row(row, duplicates, existing) for row in rows]


def batch_codes(rows: Sequence[ProductToImport]) -> list[str]:
    """Unique non-empty normalized codes, first occurrence order."""
    seen: dict[str, None] = {}
    for row in rows:
        code = normalize_code(row.code)
        if code:
            seen.setdefault(code, None)
    return list(seen)


# ===================
# EXISTING CODES
# ===================

def apply_existing_codes(
    rows: Sequence[ProductToImport],
    existing_codes: Iterable[str],
    reselect: bool = True
) -> tuple[ProductToImport, ...]:
    """
    Apply a code existence answer to the batch.

    Rows whose code the server confirmed become exists=True and, with
    reselect, selected=True even if the user had deselected them: an
    existing product is imported as a stock addition. Rows with a code the
    server did not confirm become exists=False. Rows without code are kept.
    """
    existing = {normalize_code(c) for c in existing_codes}
    updated = []
    for row in rows:
        code = normalize_code(row.code)
        if not code:
            updated.append(row)
        elif code in existing:
            changes = {"exists": True}
            if reselect:
                changes["selected"] = True
            updated.append(row.model_copy(update=changes))
        elif row.exists:
            updated.append(row.model_copy(update={"exists": False}))
        else:
            updated.append(row)
    return tuple(updated)


# ===================
# SELECTION
# ===================

def selected_products(rows: Sequence[ProductToImport]) -> list[ProductToImport]:
    """Selected rows, including existing ones queued for stock addition."""
    return [row for row in rows if row.selected]


def selected_new_products(rows: Sequence[ProductToImport]) -> list[ProductToImport]:
    """Selected rows that will be created and therefore need a price."""
    return [row for row in rows if row.selected and not row.exists]


def selected_existing_products(rows: Sequence[ProductToImport]) -> list[ProductToImport]:
    return [row for row in rows if row.selected and row.exists]


def selected_count(rows: Sequence[ProductToImport]) -> int:
    return len(selected_products(rows))


def skipped_count(rows: Sequence[ProductToImport]) -> int:
    return sum(1 for row in rows if not row.selected)


def all_selected(rows: Sequence[ProductToImport]) -> bool:
    return all(row.selected for row in rows)


def toggle_select_all(
    rows: Sequence[ProductToImport],
    checked: bool
) -> tuple[ProductToImport, ...]:
    return tuple(row.model_copy(update={"selected": checked}) for row in rows)


def duplicate_selected_codes(rows: Sequence[ProductToImport]) -> set[str]:
    """Codes shared by two or more selected rows; these cannot be submitted."""
    return find_duplicate_codes(selected_products(rows))


def has_valid_retail_price(row: ProductToImport) -> bool:
    return row.price_retail is not None and row.price_retail > 0


def can_proceed(rows: Sequence[ProductToImport]) -> bool:
    """
    Gate to leave the configure step.

    Needs one selected row, and a positive retail price on every selected
    row that is not already in the catalog. Existing rows never block.
    """
    if selected_count(rows) == 0:
        return False
    return all(has_valid_retail_price(row) for row in selected_new_products(rows))


# ===================
# TOTALS
# ===================

def _stock_or_one(row: ProductToImport) -> int:
    return row.stock_qty or 1


def total_cost(rows: Sequence[ProductToImport]) -> float:
    """Cost of everything selected, each row counted stock_qty times (min 1)."""
    return sum(row.cost_price * _stock_or_one(row) for row in selected_products(rows))


def total_retail(rows: Sequence[ProductToImport]) -> float:
    return sum(row.price_retail or 0 for row in selected_new_products(rows))


def total_stock(rows: Sequence[ProductToImport]) -> int:
    return sum(_stock_or_one(row) for row in selected_products(rows))


def summarize(
    rows: Sequence[ProductToImport],
    existing_codes: Iterable[str] = ()
) -> BatchSummary:
    """Every derived figure of the batch, computed from scratch."""
    return BatchSummary(
        selected_count=selected_count(rows),
        new_count=len(selected_new_products(rows)),
        existing_count=len(selected_existing_products(rows)),
        skipped_count=skipped_count(rows),
        all_selected=all_selected(rows),
        total_cost=round_to_cents(total_cost(rows)),
        total_retail=round_to_cents(total_retail(rows)),
        total_stock=total_stock(rows),
        can_proceed=can_proceed(rows),
        statuses=classify_rows(rows, existing_codes),
        duplicate_codes=sorted(find_duplicate_codes(rows)),
    )


# ===================
# EDITS
# ===================

def update_row(
    rows: Sequence[ProductToImport],
    index: int,
    edit: RowEdit,
    existing_codes: Iterable[str] = ()
) -> tuple[tuple[ProductToImport, ...], bool]:
    """
    Apply a user edit to one row.

    A new code drops the row's catalog flag unless existing_codes already
    confirms it; the next code check settles it.

    Returns:
        Tuple of (new rows, whether the code changed)

    Raises:
        RowNotFoundError: index outside the batch
    """
    if index < 0 or index >= len(rows):
        raise RowNotFoundError(index)

    changes = edit.model_dump(exclude_unset=True, exclude_none=True)
    # price fields may be cleared explicitly
    for field in ("price_retail", "price_wholesale"):
        if field in edit.model_fields_set:
            changes[field] = getattr(edit, field)

    row = rows[index]
    code_changed = (
        "code" in changes
        and normalize_code(changes["code"]) != normalize_code(row.code)
    )
    if code_changed:
        existing = {normalize_code(c) for c in existing_codes}
        changes["exists"] = normalize_code(changes["code"]) in existing
    new_rows = list(rows)
    new_rows[index] = row.model_copy(update=changes)
    return tuple(new_rows), code_changed


def set_row_selected(
    rows: Sequence[ProductToImport],
    index: int,
    selected: bool
) -> tuple[ProductToImport, ...]:
    new_rows, _ = update_row(rows, index, RowEdit(selected=selected))
    return new_rows
