"""
Import execution: turn the selected rows into one execute call.

New rows are created, rows already in the catalog get stock added.
Header data (invoice number, date, shipping) comes from the upload the
batch was loaded from.
"""

from datetime import date
from typing import Optional, Sequence
import structlog

from config.import_sources import FILE_FORWARDED_ON_EXECUTE, PRODUCTS_PATH, STEP_CONFIRM
from exceptions import DuplicateCodesError, StepBlockedError
from integrations.catalog_api import CatalogAPIClient, UploadFile, get_catalog_client
from integrations.messages import get_message
from integrations.notifications import Notifier
from models.catalog import Supplier
from models.import_wizard import (
    ExecuteImportRequest,
    ExecutionOutcome,
    ImportProductItem,
    ImportWizardState,
    ProductToImport,
)
from services import reconciliation_service, wizard_service
from services.reference_service import find_supplier
from utils.text_utils import invoice_slug

logger = structlog.get_logger(__name__)


def excel_invoice_number(supplier: Supplier, today: date) -> str:
    """
    Invoice number for an Excel import, which carries none.

    "Plata Sur", 2024-03-05 → "PLATA-SUR-2024-03-05-EXCEL"
    """
    return f"{invoice_slug(supplier.name)}-{today.isoformat()}-EXCEL"


def build_product_item(
    row: ProductToImport,
    supplier_id: Optional[str],
    category_id: Optional[str]
) -> ImportProductItem:
    return ImportProductItem(
        external_id=row.external_id,
        code=row.code,
        name=row.name,
        price_retail=row.price_retail,
        price_wholesale=row.price_wholesale,
        cost_price=row.cost_price,
        image_url=row.image_url,
        notes=row.notes,
        size=row.size or None,
        supplier_id=supplier_id,
        category_id=category_id or row.suggested_category_id,
        quantity=row.stock_qty or None,
    )


def build_execute_request(
    state: ImportWizardState,
    suppliers: Sequence[Supplier] = (),
    has_file: bool = False,
    today: Optional[date] = None
) -> ExecuteImportRequest:
    """
    Payload for the execute call.

    Invoice and email imports take number, date and shipping from their
    header. Excel imports get a generated number and today's date when a
    known supplier is chosen.
    """
    today = today or date.today()
    products = [
        build_product_item(row, state.supplier_id, state.category_id)
        for row in reconciliation_service.selected_products(state.rows)
    ]

    invoice_number = None
    invoice_date = None
    shipping_cost = None
    tracking_number = None
    carrier = None

    if wizard_service.is_invoice_source(state):
        invoice_number = state.invoice_info.number
        invoice_date = state.invoice_info.date
        shipping_cost = state.invoice_info.shipping_cost or None
    elif wizard_service.is_email_source(state):
        invoice_number = state.email_info.order_number
        invoice_date = state.email_info.order_date
        shipping_cost = state.email_info.shipping_cost or None
        tracking_number = state.email_info.tracking_number
        carrier = state.email_info.carrier
    elif wizard_service.is_excel_source(state):
        supplier = find_supplier(suppliers, state.supplier_id)
        if supplier is not None:
            invoice_number = excel_invoice_number(supplier, today)
        invoice_date = today.isoformat()
        shipping_cost = state.excel_info.shipping_cost or None

    return ExecuteImportRequest(
        source=state.source.id,
        products=products,
        invoice_number=invoice_number,
        invoice_date=invoice_date,
        supplier_id=state.supplier_id,
        shipping_cost=shipping_cost,
        save_pdf=wizard_service.is_invoice_source(state) and has_file,
        tracking_number=tracking_number,
        carrier=carrier,
    )


class ImportExecutionService:
    """Submits a configured batch to the API and reports the outcome as toasts."""

    def __init__(self, client: Optional[CatalogAPIClient] = None):
        self.client = client or get_catalog_client()

    def execute(
        self,
        state: ImportWizardState,
        notifier: Notifier,
        suppliers: Optional[Sequence[Supplier]] = None,
        file: Optional[UploadFile] = None
    ) -> tuple[ImportWizardState, ExecutionOutcome]:
        """
        Run the import.

        An empty selection only raises a warning toast. A failed call raises
        an error toast and keeps the batch so the user can retry. On success
        the wizard starts over.

        Suppliers are only needed to name Excel imports and are fetched when
        not given.

        Raises:
            StepBlockedError: Wizard not on the confirm step, or a selected new
                row has no retail price
            DuplicateCodesError: Two selected rows share a code
        """
        selected = reconciliation_service.selected_products(state.rows)
        if not selected:
            notifier.warn(get_message("summary_warning"), get_message("no_products_selected"))
            return state, ExecutionOutcome(success=False)

        if state.current_step != STEP_CONFIRM:
            logger.warning("import_blocked_step", step=state.current_step)
            raise StepBlockedError(
                state.current_step,
                "Review the batch on the confirm step before importing"
            )
        if not reconciliation_service.can_proceed(state.rows):
            logger.warning("import_blocked_unpriced", step=state.current_step)
            raise StepBlockedError(
                state.current_step,
                "Set a retail price on every new product before importing"
            )

        duplicates = reconciliation_service.duplicate_selected_codes(state.rows)
        if duplicates:
            logger.warning("import_blocked_duplicates", codes=sorted(duplicates))
            raise DuplicateCodesError(list(duplicates))

        source_id = state.source.id if state.source else None
        forwarded = file if source_id in FILE_FORWARDED_ON_EXECUTE else None

        logger.info(
            "import_execute_started",
            source=source_id,
            products=len(selected),
            existing=len(reconciliation_service.selected_existing_products(state.rows)),
            with_file=forwarded is not None
        )

        result = None
        state = state.model_copy(update={"importing": True})
        try:
            if suppliers is None and wizard_service.is_excel_source(state):
                suppliers = self.client.suppliers.list()
            payload = build_execute_request(state, suppliers or (), has_file=file is not None)
            result = self.client.imports.execute(payload, forwarded)
        except Exception as e:
            logger.error("import_execute_failed", source=source_id, error=str(e))
            notifier.error(e)
        finally:
            state = state.model_copy(update={"importing": False})

        if result is None:
            return state, ExecutionOutcome(success=False)

        notifier.success(
            get_message("summary_import_success"),
            get_message("imported_count", imported=result.imported, skipped=result.skipped)
        )
        if result.errors:
            notifier.warn(
                get_message("summary_item_errors"),
                get_message("item_errors", count=len(result.errors)),
                life=5000
            )

        logger.info(
            "import_execute_complete",
            source=source_id,
            imported=result.imported,
            skipped=result.skipped,
            errors=len(result.errors)
        )

        return wizard_service.reset(state), ExecutionOutcome(
            success=True,
            result=result,
            redirect_to=PRODUCTS_PATH
        )


# Singleton instance for convenience
_execution_service: Optional[ImportExecutionService] = None

def get_import_execution_service() -> ImportExecutionService:
    """Get or create ImportExecutionService instance."""
    global _execution_service
    if _execution_service is None:
        _execution_service = ImportExecutionService()
    return _execution_service
