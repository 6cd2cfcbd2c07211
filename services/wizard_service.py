"""
Import wizard reducers.

Every function takes an ImportWizardState and returns a new one; nothing is
mutated. Steps: 0 source, 1 search/upload, 2 configure and price, 3 confirm.
"""

from typing import Optional
import structlog

from config import settings
from config.import_sources import (
    DISABLED_SOURCES,
    EXCEL_SUPPLIER,
    FILE_SOURCES,
    FIRST_STEP,
    LAST_STEP,
    MAYORISTA_PLATA,
    PANBUBU_EMAIL,
    RAINBOW_INVOICE,
    STEP_CONFIGURE,
    STEP_LOAD,
    STEP_SOURCE,
)
from exceptions import ImportSourceDisabledError, StepBlockedError
from models.import_wizard import (
    BatchSummary,
    CodeCheckState,
    EmailInfo,
    ExcelInfo,
    ImportSource,
    ImportWizardState,
    InvoiceInfo,
    ProductToImport,
    RowEdit,
    SearchState,
)
from services import pricing_service, reconciliation_service
from utils.text_utils import normalize_code

logger = structlog.get_logger(__name__)


def new_state() -> ImportWizardState:
    """Fresh wizard at the source step."""
    return ImportWizardState(
        search=SearchState(page_size=settings.import_page_size),
        custom_margin=settings.default_custom_margin,
    )


def reset(state: Optional[ImportWizardState] = None) -> ImportWizardState:
    """Back to the first step with nothing loaded."""
    fresh = new_state()
    if state is None:
        return fresh
    return fresh.model_copy(update={"code_check": invalidated_checks(state)})


def invalidated_checks(state: ImportWizardState) -> CodeCheckState:
    """
    Forget confirmed codes and retire every check in flight.

    Sequence numbers keep growing so an old answer can never match a new check.
    """
    return CodeCheckState(
        latest_seq=state.code_check.latest_seq + 1,
        applied_seq=state.code_check.applied_seq,
    )


# ===================
# SOURCE FLAGS
# ===================

def _source_id(state: ImportWizardState) -> Optional[str]:
    return state.source.id if state.source else None


def is_invoice_source(state: ImportWizardState) -> bool:
    return _source_id(state) == RAINBOW_INVOICE


def is_email_source(state: ImportWizardState) -> bool:
    return _source_id(state) == PANBUBU_EMAIL


def is_excel_source(state: ImportWizardState) -> bool:
    return _source_id(state) == EXCEL_SUPPLIER


def is_mayorista_plata_source(state: ImportWizardState) -> bool:
    return _source_id(state) == MAYORISTA_PLATA


def is_file_source(state: ImportWizardState) -> bool:
    return _source_id(state) in FILE_SOURCES


# ===================
# SELECTIONS
# ===================

def select_source(state: ImportWizardState, source: ImportSource) -> ImportWizardState:
    """
    Choose where products come from.

    Switching source drops the loaded batch and upload headers.

    Raises:
        ImportSourceDisabledError: source cannot be selected yet
    """
    if source.id in DISABLED_SOURCES:
        raise ImportSourceDisabledError(source.id)

    if state.source and state.source.id == source.id:
        return state

    logger.info("import_source_selected", source=source.id)
    return state.model_copy(update={
        "source": source,
        "rows": (),
        "search": SearchState(page_size=state.search.page_size),
        "code_check": invalidated_checks(state),
        "invoice_info": InvoiceInfo(),
        "email_info": EmailInfo(),
        "excel_info": ExcelInfo(),
    })


def set_supplier(state: ImportWizardState, supplier_id: Optional[str]) -> ImportWizardState:
    return state.model_copy(update={"supplier_id": supplier_id or None})


def set_category(state: ImportWizardState, category_id: Optional[str]) -> ImportWizardState:
    return state.model_copy(update={"category_id": category_id or None})


# ===================
# STEPS
# ===================

def _blocking_reason(state: ImportWizardState) -> Optional[str]:
    """Why the wizard cannot leave its current step, or None."""
    step = state.current_step
    if step == STEP_SOURCE and state.source is None:
        return "Select an import source first"
    if step == STEP_LOAD and not state.rows:
        return "Load products from the source first"
    if step == STEP_CONFIGURE and not reconciliation_service.can_proceed(state.rows):
        return "Select at least one product and set a retail price on every new product"
    return None


def can_advance(state: ImportWizardState) -> bool:
    return state.current_step < LAST_STEP and _blocking_reason(state) is None


def next_step(state: ImportWizardState) -> ImportWizardState:
    """
    Move forward one step.

    Raises:
        StepBlockedError: current step is not complete
    """
    if state.current_step >= LAST_STEP:
        return state

    reason = _blocking_reason(state)
    if reason:
        logger.info("wizard_step_blocked", step=state.current_step, reason=reason)
        raise StepBlockedError(state.current_step, reason)

    return state.model_copy(update={"current_step": state.current_step + 1})


def previous_step(state: ImportWizardState) -> ImportWizardState:
    if state.current_step <= FIRST_STEP:
        return state
    return state.model_copy(update={"current_step": state.current_step - 1})


# ===================
# BATCH
# ===================

def load_rows(
    state: ImportWizardState,
    rows: list[ProductToImport],
    invoice_info: Optional[InvoiceInfo] = None,
    email_info: Optional[EmailInfo] = None,
    excel_info: Optional[ExcelInfo] = None,
    supplier_id: Optional[str] = None
) -> ImportWizardState:
    """
    Replace the batch with rows parsed from an upload.

    A supplier suggested by the parser only fills an empty supplier choice.
    """
    update = {
        "rows": tuple(rows),
        "code_check": invalidated_checks(state),
        "invoice_info": invoice_info or InvoiceInfo(),
        "email_info": email_info or EmailInfo(),
        "excel_info": excel_info or ExcelInfo(),
    }
    if supplier_id and not state.supplier_id:
        update["supplier_id"] = supplier_id
    return state.model_copy(update=update)


def edit_row(
    state: ImportWizardState,
    index: int,
    edit: RowEdit
) -> tuple[ImportWizardState, bool]:
    """
    Apply a user edit to one row.

    Returns:
        Tuple of (new state, whether the row's code changed)
    """
    rows, code_changed = reconciliation_service.update_row(
        state.rows,
        index,
        edit,
        state.code_check.existing_codes
    )
    return state.model_copy(update={"rows": rows}), code_changed


def toggle_select_all(state: ImportWizardState, checked: bool) -> ImportWizardState:
    return state.model_copy(update={
        "rows": reconciliation_service.toggle_select_all(state.rows, checked)
    })


def apply_margin(state: ImportWizardState, multiplier: float) -> ImportWizardState:
    """Reprice the selected new rows; a non-preset multiplier is kept as the custom one."""
    update = {"rows": pricing_service.apply_margin(state.rows, multiplier)}
    if multiplier not in settings.margin_presets:
        update["custom_margin"] = multiplier
    return state.model_copy(update=update)


def known_existing_codes(state: ImportWizardState) -> set[str]:
    """Codes confirmed by the last code check or flagged by the source."""
    codes = set(state.code_check.existing_codes)
    codes.update(normalize_code(row.code) for row in state.rows if row.exists and row.code)
    return codes


def summary(state: ImportWizardState) -> BatchSummary:
    return reconciliation_service.summarize(state.rows, known_existing_codes(state))
