"""
Import wizard API routes.

One wizard per session. Every operation loads the stored state, runs a
reducer or service on it, stores the result and answers with the new state,
its summary and the toasts raised along the way.
"""

from fastapi import APIRouter, UploadFile, File
from fastapi.responses import JSONResponse, Response
from typing import Optional
import structlog

from exceptions import AppError
from integrations.catalog_api import UploadFile as ForwardedFile
from integrations.notifications import Notifier
from models.import_wizard import (
    BatchSummary,
    CategoryChoice,
    ExecutionOutcome,
    ImportSource,
    ImportWizardState,
    MarginBody,
    ReferenceResponse,
    RowEdit,
    SearchBody,
    SelectAllBody,
    SupplierChoice,
    WizardResponse,
)
from services import wizard_service, wizard_session_service
from services.code_check_service import get_code_check_service
from services.import_execution_service import get_import_execution_service
from services.reference_service import get_reference_service
from services.search_service import get_import_search_service
from services.upload_service import get_import_upload_service

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


def _respond(
    session_id: str,
    state: ImportWizardState,
    notifier: Optional[Notifier] = None,
    outcome: Optional[ExecutionOutcome] = None
) -> WizardResponse:
    """Store the new state and build the response."""
    wizard_session_service.save_state(session_id, state)
    notifications = wizard_session_service.drain_notifications(session_id)
    if notifier is not None:
        notifications += notifier.drain()
    return WizardResponse(
        session_id=session_id,
        state=state,
        summary=wizard_service.summary(state),
        notifications=notifications,
        outcome=outcome,
    )


def _state(session_id: str) -> ImportWizardState:
    return wizard_session_service.get_session(session_id).state


# ===================
# SESSIONS
# ===================

@router.post("/sessions", response_model=WizardResponse, status_code=201)
async def create_session():
    """Start a new wizard at the source step."""
    try:
        session = wizard_session_service.create_session(wizard_service.new_state())
        return _respond(session.id, session.state)

    except Exception as e:
        return handle_error(e)


@router.get("/sessions/{session_id}", response_model=WizardResponse)
async def get_session(session_id: str):
    """
    Current wizard state.

    Also delivers toasts raised by background code checks.

    Raises:
        404: Session not found or expired
    """
    try:
        return _respond(session_id, _state(session_id))

    except Exception as e:
        return handle_error(e)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str):
    """Drop a wizard."""
    get_code_check_service().debouncer.cancel(session_id)
    wizard_session_service.delete_session(session_id)
    return Response(status_code=204)


# ===================
# REFERENCE DATA
# ===================

@router.get("/reference", response_model=ReferenceResponse)
async def get_reference_data():
    """Sources, suppliers and categories, with select options."""
    try:
        notifier = Notifier()
        data = await get_reference_service().load_reference_data(notifier)
        return ReferenceResponse(data=data, notifications=notifier.drain())

    except Exception as e:
        return handle_error(e)


# ===================
# SOURCE AND CHOICES
# ===================

@router.post("/sessions/{session_id}/source", response_model=WizardResponse)
async def select_source(session_id: str, source: ImportSource):
    """
    Choose the import source.

    Raises:
        404: Session not found
        422: Source disabled
    """
    try:
        state = wizard_service.select_source(_state(session_id), source)
        return _respond(session_id, state)

    except Exception as e:
        return handle_error(e)


@router.put("/sessions/{session_id}/supplier", response_model=WizardResponse)
async def set_supplier(session_id: str, data: SupplierChoice):
    try:
        state = wizard_service.set_supplier(_state(session_id), data.supplier_id)
        return _respond(session_id, state)

    except Exception as e:
        return handle_error(e)


@router.put("/sessions/{session_id}/category", response_model=WizardResponse)
async def set_category(session_id: str, data: CategoryChoice):
    try:
        state = wizard_service.set_category(_state(session_id), data.category_id)
        return _respond(session_id, state)

    except Exception as e:
        return handle_error(e)


# ===================
# STEPS
# ===================

@router.post("/sessions/{session_id}/next", response_model=WizardResponse)
async def next_step(session_id: str):
    """
    Advance one step.

    Raises:
        422: Current step not complete
    """
    try:
        state = wizard_service.next_step(_state(session_id))
        return _respond(session_id, state)

    except Exception as e:
        return handle_error(e)


@router.post("/sessions/{session_id}/previous", response_model=WizardResponse)
async def previous_step(session_id: str):
    try:
        state = wizard_service.previous_step(_state(session_id))
        return _respond(session_id, state)

    except Exception as e:
        return handle_error(e)


@router.post("/sessions/{session_id}/reset", response_model=WizardResponse)
async def reset_wizard(session_id: str):
    """Start over, keeping the session."""
    try:
        get_code_check_service().debouncer.cancel(session_id)
        state = wizard_service.reset(_state(session_id))
        wizard_session_service.store_upload(session_id, None)
        return _respond(session_id, state)

    except Exception as e:
        return handle_error(e)


# ===================
# LOADING ROWS
# ===================

@router.post("/sessions/{session_id}/search", response_model=WizardResponse)
async def search(session_id: str, data: SearchBody):
    """First page of a source search; replaces the batch."""
    try:
        notifier = Notifier()
        state = get_import_search_service().start_search(
            _state(session_id),
            notifier,
            query=data.query,
            category=data.category
        )
        return _respond(session_id, state, notifier)

    except Exception as e:
        return handle_error(e)


@router.post("/sessions/{session_id}/load-more", response_model=WizardResponse)
async def load_more(session_id: str):
    """Append the next page of the current search."""
    try:
        notifier = Notifier()
        state = get_import_search_service().load_more(_state(session_id), notifier)
        return _respond(session_id, state, notifier)

    except Exception as e:
        return handle_error(e)


@router.post("/sessions/{session_id}/upload", response_model=WizardResponse)
async def upload_document(session_id: str, file: UploadFile = File(...)):
    """
    Upload an invoice, email, Excel sheet or wholesaler PDF.

    The file is kept with the session for sources that send it again on
    execute.
    """
    logger.info(
        "wizard_upload_received",
        session_id=session_id,
        filename=file.filename,
        content_type=file.content_type
    )

    try:
        content = await file.read()
        forwarded = ForwardedFile(
            filename=file.filename or "upload",
            content=content,
            content_type=file.content_type or "application/octet-stream"
        )

        notifier = Notifier()
        before = _state(session_id)
        state = get_import_upload_service().load_upload(before, forwarded, notifier)
        if state is not before:
            wizard_session_service.store_upload(session_id, forwarded)
        return _respond(session_id, state, notifier)

    except Exception as e:
        return handle_error(e)


# ===================
# BATCH EDITS
# ===================

@router.patch("/sessions/{session_id}/rows/{index}", response_model=WizardResponse)
async def edit_row(session_id: str, index: int, data: RowEdit):
    """
    Edit one row.

    A code change schedules a debounced existence check.

    Raises:
        404: Session or row not found
    """
    try:
        state, code_changed = wizard_service.edit_row(_state(session_id), index, data)
        response = _respond(session_id, state)
        if code_changed:
            get_code_check_service().schedule_session_check(session_id)
        return response

    except Exception as e:
        return handle_error(e)


@router.post("/sessions/{session_id}/select-all", response_model=WizardResponse)
async def toggle_select_all(session_id: str, data: SelectAllBody):
    try:
        state = wizard_service.toggle_select_all(_state(session_id), data.checked)
        return _respond(session_id, state)

    except Exception as e:
        return handle_error(e)


@router.post("/sessions/{session_id}/margin", response_model=WizardResponse)
async def apply_margin(session_id: str, data: MarginBody):
    """
    Price selected new rows at cost × multiplier.

    Raises:
        422: Multiplier out of range
    """
    try:
        state = wizard_service.apply_margin(_state(session_id), data.multiplier)
        return _respond(session_id, state)

    except Exception as e:
        return handle_error(e)


@router.post("/sessions/{session_id}/check-codes", response_model=WizardResponse)
async def check_codes(session_id: str):
    """Check the batch codes against the catalog now."""
    try:
        service = get_code_check_service()
        service.debouncer.cancel(session_id)
        notifier = Notifier()
        state = service.check_state(_state(session_id), notifier)
        return _respond(session_id, state, notifier)

    except Exception as e:
        return handle_error(e)


@router.get("/sessions/{session_id}/summary", response_model=BatchSummary)
async def get_summary(session_id: str):
    try:
        return wizard_service.summary(_state(session_id))

    except Exception as e:
        return handle_error(e)


# ===================
# EXECUTE
# ===================

@router.post("/sessions/{session_id}/execute", response_model=WizardResponse)
async def execute_import(session_id: str):
    """
    Import the selected rows.

    Raises:
        422: Not on the confirm step, or a new row has no retail price
        409: Selected rows share a code
    """
    try:
        session = wizard_session_service.get_session(session_id)
        notifier = Notifier()
        state, outcome = get_import_execution_service().execute(
            session.state,
            notifier,
            file=session.upload
        )
        if outcome.success:
            get_code_check_service().debouncer.cancel(session_id)
            wizard_session_service.store_upload(session_id, None)
        return _respond(session_id, state, notifier, outcome)

    except Exception as e:
        return handle_error(e)
