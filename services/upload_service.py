"""
Uploads for file sources.

The file is forwarded to the API for parsing; the preview that comes back
is mapped to wizard rows and its header kept for the execute call.
"""

from typing import Optional
import structlog

from exceptions import StepBlockedError
from integrations.catalog_api import CatalogAPIClient, UploadFile, get_catalog_client
from integrations.messages import get_message
from integrations.notifications import Notifier
from models.import_wizard import EmailInfo, ExcelInfo, ImportWizardState, InvoiceInfo
from services import wizard_service
from utils.import_mappers import (
    map_email_item,
    map_excel_item,
    map_invoice_item,
    map_mayorista_plata_item,
)

logger = structlog.get_logger(__name__)


class ImportUploadService:
    """Parses supplier documents through the API and loads the result."""

    def __init__(self, client: Optional[CatalogAPIClient] = None):
        self.client = client or get_catalog_client()

    def load_upload(
        self,
        state: ImportWizardState,
        file: UploadFile,
        notifier: Notifier
    ) -> ImportWizardState:
        """
        Parse an uploaded document and replace the batch with its items.

        A document already imported before still loads, with a warning toast.
        On failure an error toast is raised and the batch stays as it was.

        Raises:
            StepBlockedError: selected source does not take files
        """
        if not wizard_service.is_file_source(state):
            raise StepBlockedError(state.current_step, "The selected source does not take files")

        source_id = state.source.id
        logger.info(
            "import_upload_started",
            source=source_id,
            filename=file.filename,
            size_bytes=len(file.content)
        )

        try:
            new_state = self._parse(state, file, notifier)
        except Exception as e:
            logger.error(
                "import_upload_failed",
                source=source_id,
                filename=file.filename,
                error=str(e)
            )
            notifier.error(e)
            return state

        logger.info("import_upload_complete", source=source_id, rows=len(new_state.rows))
        return new_state

    def _parse(
        self,
        state: ImportWizardState,
        file: UploadFile,
        notifier: Notifier
    ) -> ImportWizardState:
        imports = self.client.imports

        if wizard_service.is_invoice_source(state):
            preview = imports.parse_invoice(file)
            if preview.invoice_exists:
                self._warn_already_imported(notifier, "invoice_already_imported", preview.invoice_number)
            return wizard_service.load_rows(
                state,
                [map_invoice_item(item) for item in preview.items],
                invoice_info=InvoiceInfo(
                    number=preview.invoice_number,
                    date=preview.invoice_date,
                    exists=preview.invoice_exists,
                    existing_id=preview.existing_invoice_id,
                    subtotal=preview.subtotal,
                    shipping_cost=preview.shipping_cost,
                ),
                supplier_id=preview.suggested_supplier_id,
            )

        if wizard_service.is_email_source(state):
            preview = imports.parse_email(file)
            if preview.order_exists:
                self._warn_already_imported(notifier, "order_already_imported", preview.order_number)
            return wizard_service.load_rows(
                state,
                [map_email_item(item) for item in preview.items],
                email_info=EmailInfo(
                    order_number=preview.order_number,
                    order_date=preview.order_date,
                    order_exists=preview.order_exists,
                    existing_order_id=preview.existing_order_id,
                    tracking_number=preview.tracking_number,
                    carrier=preview.carrier,
                    subtotal=preview.subtotal,
                    shipping_cost=preview.shipping_cost,
                    charge_fee=preview.charge_fee,
                    total=preview.total,
                ),
                supplier_id=preview.suggested_supplier_id,
            )

        if wizard_service.is_excel_source(state):
            preview = imports.parse_excel(file)
            return wizard_service.load_rows(
                state,
                [map_excel_item(item) for item in preview.items],
                excel_info=ExcelInfo(
                    shipping_cost=preview.shipping_cost,
                    total_amount=preview.total_amount,
                ),
            )

        # mayorista-plata
        preview = imports.parse_mayorista_plata(file)
        if preview.invoice_exists:
            self._warn_already_imported(notifier, "invoice_already_imported", preview.invoice_number)
        return wizard_service.load_rows(
            state,
            [map_mayorista_plata_item(item) for item in preview.items],
            invoice_info=InvoiceInfo(
                number=preview.invoice_number,
                date=preview.invoice_date,
                exists=preview.invoice_exists,
                existing_id=preview.existing_invoice_id,
                subtotal=preview.subtotal,
                shipping_cost=preview.shipping_cost,
            ),
            supplier_id=preview.suggested_supplier_id,
        )

    @staticmethod
    def _warn_already_imported(notifier: Notifier, key: str, number: Optional[str]) -> None:
        notifier.warn(get_message("summary_warning"), get_message(key, number=number or "-"))


# Singleton instance for convenience
_upload_service: Optional[ImportUploadService] = None

def get_import_upload_service() -> ImportUploadService:
    """Get or create ImportUploadService instance."""
    global _upload_service
    if _upload_service is None:
        _upload_service = ImportUploadService()
    return _upload_service
