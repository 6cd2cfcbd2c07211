"""
Import wizard schemas.

Candidate rows, upload previews from each supplier source, the execute
payload and the wizard state value object.
"""

from pydantic import Field
from typing import Optional
from enum import Enum

from models.base import BaseSchema, FrozenSchema, SelectOption
from models.catalog import Category, Supplier
from models.notification import Notification


class RowStatus(str, Enum):
    """Reconciliation status of a candidate row."""
    NEW = "new"
    DUPLICATE_IN_BATCH = "duplicate-in-batch"
    EXISTS_IN_CATALOG = "exists-in-catalog"


class ImportSource(BaseSchema):
    """External origin of importable products."""
    id: str
    name: str
    product_types: list[str] = Field(default_factory=list)


# ===================
# CANDIDATE ROWS
# ===================

class ImportProductPreview(BaseSchema):
    """Row as returned by a source search."""

    external_id: str
    code: str = ""
    name: str = ""
    product_type: str = ""
    cost_price_raw: float = 0
    weight_grams: float = 0
    metal_type: str = ""
    size: str = ""
    stock_qty: int = 0
    tags: list[str] = Field(default_factory=list)
    notes: str = ""
    image_url: str = ""
    suggested_category_id: Optional[str] = None
    exists: bool = False


class ProductToImport(FrozenSchema):
    """
    Candidate row in the import wizard.

    Immutable; edits produce a new row through model_copy.
    """

    external_id: str
    code: str = ""
    name: str = ""
    product_type: str = ""
    cost_price_raw: float = 0
    cost_price: float = 0
    weight_grams: float = 0
    metal_type: str = ""
    size: str = ""
    stock_qty: int = 0
    tags: tuple[str, ...] = ()
    notes: str = ""
    image_url: str = ""
    suggested_category_id: Optional[str] = None
    exists: bool = False
    selected: bool = False
    price_retail: Optional[float] = None
    price_wholesale: Optional[float] = None


class RowEdit(BaseSchema):
    """User edit on one row. Only provided fields change."""

    code: Optional[str] = None
    name: Optional[str] = None
    cost_price: Optional[float] = Field(None, ge=0)
    price_retail: Optional[float] = None
    price_wholesale: Optional[float] = None
    stock_qty: Optional[int] = Field(None, ge=0)
    size: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    selected: Optional[bool] = None


# ===================
# SEARCH
# ===================

class ImportSearchRequest(BaseSchema):
    source: str
    search: Optional[str] = None
    category: Optional[str] = None
    page: int = Field(1, ge=1)
    page_size: int = Field(50, ge=1)


# ===================
# PDF INVOICE (rainbow-invoice)
# ===================

class ParsedInvoiceItem(BaseSchema):
    line_number: int = 0
    item_code: str = ""
    description: str = ""
    weight: float = 0
    quantity: int = 0
    unit: str = ""
    price_per_gram: float = 0
    total_amount: float = 0


class InvoicePreviewItem(BaseSchema):
    code: str
    name: str = ""
    image_url: Optional[str] = None
    product_type: str = ""
    cost_price: float = 0
    found_in_api: bool = False
    exists: bool = False
    suggested_retail_price: Optional[float] = None
    suggested_wholesale_price: Optional[float] = None
    suggested_category_id: Optional[str] = None
    parsed_data: ParsedInvoiceItem = Field(default_factory=ParsedInvoiceItem)


class InvoicePreviewResponse(BaseSchema):
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    invoice_exists: bool = False
    existing_invoice_id: Optional[str] = None
    items: list[InvoicePreviewItem] = Field(default_factory=list)
    suggested_supplier_id: Optional[str] = None
    subtotal: float = 0
    shipping_cost: float = 0


# ===================
# EMAIL ORDER (panbubu-email)
# ===================

class EmailParsedItem(BaseSchema):
    product_id: str = ""
    name: str = ""
    variant_number: Optional[str] = None
    size: Optional[str] = None
    colour: Optional[str] = None
    unit_price: float = 0
    quantity: int = 0
    subtotal: float = 0
    image_url: Optional[str] = None


class EmailPreviewItem(BaseSchema):
    code: str
    name: str = ""
    image_url: Optional[str] = None
    product_type: str = ""
    cost_price: float = 0
    quantity: int = 0
    size: Optional[str] = None
    exists: bool = False
    suggested_retail_price: Optional[float] = None
    suggested_wholesale_price: Optional[float] = None
    suggested_category_id: Optional[str] = None
    notes: str = ""
    parsed_data: EmailParsedItem = Field(default_factory=EmailParsedItem)


class EmailPreviewResponse(BaseSchema):
    order_number: Optional[str] = None
    order_date: Optional[str] = None
    order_exists: bool = False
    existing_order_id: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    items: list[EmailPreviewItem] = Field(default_factory=list)
    suggested_supplier_id: Optional[str] = None
    subtotal: float = 0
    shipping_cost: float = 0
    charge_fee: float = 0
    total: float = 0


# ===================
# EXCEL SHEET (excel-supplier)
# ===================

class ExcelParsedItem(BaseSchema):
    line_number: int = 0
    item_code: str = ""
    original_code: str = ""
    description: str = ""
    size: Optional[str] = None
    unit_price: float = 0
    quantity: int = 0
    total_amount: float = 0


class ExcelPreviewItem(BaseSchema):
    code: str
    original_code: str = ""
    name: str = ""
    image_url: Optional[str] = None
    image_data_url: Optional[str] = None
    product_type: str = ""
    cost_price: float = 0
    quantity: int = 0
    size: Optional[str] = None
    exists: bool = False
    suggested_retail_price: Optional[float] = None
    suggested_wholesale_price: Optional[float] = None
    suggested_category_id: Optional[str] = None
    notes: str = ""
    parsed_data: ExcelParsedItem = Field(default_factory=ExcelParsedItem)


class ExcelPreviewResponse(BaseSchema):
    items: list[ExcelPreviewItem] = Field(default_factory=list)
    shipping_cost: float = 0
    total_amount: float = 0


# ===================
# WHOLESALER PDF (mayorista-plata)
# ===================

class MayoristaPlataParsedItem(BaseSchema):
    line_number: int = 0
    reference: str = ""
    description: str = ""
    variant: Optional[str] = None
    quantity: int = 0
    unit_price: float = 0
    total_amount: float = 0


class MayoristaPlataPreviewItem(BaseSchema):
    code: str
    name: str = ""
    product_type: str = ""
    cost_price: float = 0
    quantity: int = 0
    size: Optional[str] = None
    exists: bool = False
    suggested_retail_price: Optional[float] = None
    suggested_wholesale_price: Optional[float] = None
    suggested_category_id: Optional[str] = None
    notes: str = ""
    parsed_data: MayoristaPlataParsedItem = Field(default_factory=MayoristaPlataParsedItem)


class MayoristaPlataPreviewResponse(BaseSchema):
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    invoice_exists: bool = False
    existing_invoice_id: Optional[str] = None
    items: list[MayoristaPlataPreviewItem] = Field(default_factory=list)
    suggested_supplier_id: Optional[str] = None
    subtotal: float = 0
    shipping_cost: float = 0


# ===================
# UPLOAD HEADERS KEPT IN THE WIZARD
# ===================

class InvoiceInfo(FrozenSchema):
    number: Optional[str] = None
    date: Optional[str] = None
    exists: bool = False
    existing_id: Optional[str] = None
    subtotal: float = 0
    shipping_cost: float = 0


class EmailInfo(FrozenSchema):
    order_number: Optional[str] = None
    order_date: Optional[str] = None
    order_exists: bool = False
    existing_order_id: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    subtotal: float = 0
    shipping_cost: float = 0
    charge_fee: float = 0
    total: float = 0


class ExcelInfo(FrozenSchema):
    shipping_cost: float = 0
    total_amount: float = 0


# ===================
# EXECUTE
# ===================

class ImportProductItem(BaseSchema):
    external_id: str
    code: str
    name: str
    price_retail: Optional[float] = None
    price_wholesale: Optional[float] = None
    cost_price: Optional[float] = None
    image_url: Optional[str] = None
    notes: Optional[str] = None
    size: Optional[str] = None
    supplier_id: Optional[str] = None
    category_id: Optional[str] = None
    quantity: Optional[int] = None


class ExecuteImportRequest(BaseSchema):
    source: str
    products: list[ImportProductItem]
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    supplier_id: Optional[str] = None
    shipping_cost: Optional[float] = None
    save_pdf: bool = False
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None


class ImportItemError(BaseSchema):
    code: str
    error: str


class ImportResult(BaseSchema):
    imported: int = 0
    skipped: int = 0
    errors: list[ImportItemError] = Field(default_factory=list)


# ===================
# WIZARD STATE
# ===================

class SearchState(FrozenSchema):
    """Pagination bookkeeping for source search."""
    query: Optional[str] = None
    category: Optional[str] = None
    page: int = 0
    page_size: int = 50
    has_more: bool = False
    loading: bool = False


class CodeCheckState(FrozenSchema):
    """
    Sequence numbers of code existence checks.

    Only the answer to latest_seq may touch the rows.
    """
    latest_seq: int = 0
    applied_seq: int = 0
    existing_codes: frozenset[str] = frozenset()


class ImportWizardState(FrozenSchema):
    """Whole state of one import wizard."""

    current_step: int = Field(0, ge=0, le=3)
    source: Optional[ImportSource] = None
    supplier_id: Optional[str] = None
    category_id: Optional[str] = None
    rows: tuple[ProductToImport, ...] = ()
    search: SearchState = Field(default_factory=SearchState)
    code_check: CodeCheckState = Field(default_factory=CodeCheckState)
    invoice_info: InvoiceInfo = Field(default_factory=InvoiceInfo)
    email_info: EmailInfo = Field(default_factory=EmailInfo)
    excel_info: ExcelInfo = Field(default_factory=ExcelInfo)
    custom_margin: float = 2.0
    loading: bool = False
    importing: bool = False


class BatchSummary(BaseSchema):
    """Figures derived from the rows on demand."""

    selected_count: int
    new_count: int
    existing_count: int
    skipped_count: int
    all_selected: bool
    total_cost: float
    total_retail: float
    total_stock: int
    can_proceed: bool
    statuses: list[RowStatus]
    duplicate_codes: list[str]


# ===================
# REFERENCE DATA
# ===================

class ReferenceData(BaseSchema):
    """Lookups the wizard needs: sources, suppliers and categories."""

    sources: list[ImportSource] = Field(default_factory=list)
    suppliers: list[Supplier] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    supplier_options: list[SelectOption] = Field(default_factory=list)
    category_options: list[SelectOption] = Field(default_factory=list)


class ExecutionOutcome(BaseSchema):
    """What an execute attempt ended in; redirect_to is set on success."""

    success: bool
    result: Optional[ImportResult] = None
    redirect_to: Optional[str] = None


# ===================
# WIZARD HTTP BODIES
# ===================

class SearchBody(BaseSchema):
    query: Optional[str] = None
    category: Optional[str] = None


class SupplierChoice(BaseSchema):
    supplier_id: Optional[str] = None


class CategoryChoice(BaseSchema):
    category_id: Optional[str] = None


class SelectAllBody(BaseSchema):
    checked: bool


class MarginBody(BaseSchema):
    multiplier: float


class WizardResponse(BaseSchema):
    """State after an operation, its derived figures and the toasts it raised."""

    session_id: str
    state: ImportWizardState
    summary: BatchSummary
    notifications: list[Notification] = Field(default_factory=list)
    outcome: Optional[ExecutionOutcome] = None


class ReferenceResponse(BaseSchema):
    data: ReferenceData
    notifications: list[Notification] = Field(default_factory=list)
