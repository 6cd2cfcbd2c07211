"""
Pydantic models for validation and serialization.

All schemas derive from BaseSchema (camelCase aliases, snake_case names).
"""

from models.base import (
    BaseSchema,
    FrozenSchema,
    TimestampMixin,
    SelectOption,
)
from models.catalog import (
    OrderStatus,
    CustomerType,
    Supplier,
    Category,
    Product,
    ProductCreate,
    ProductUpdate,
    Customer,
    Order,
    OrderItem,
    ShippingZone,
    SupplierOrder,
    DashboardStats,
)
from models.notification import (
    Severity,
    Notification,
)
from models.import_wizard import (
    RowStatus,
    ImportSource,
    ImportProductPreview,
    ProductToImport,
    RowEdit,
    ImportSearchRequest,
    InvoicePreviewResponse,
    EmailPreviewResponse,
    ExcelPreviewResponse,
    MayoristaPlataPreviewResponse,
    InvoiceInfo,
    EmailInfo,
    ExcelInfo,
    ImportProductItem,
    ExecuteImportRequest,
    ImportResult,
    SearchState,
    CodeCheckState,
    ImportWizardState,
    BatchSummary,
    ReferenceData,
    ExecutionOutcome,
    WizardResponse,
)

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",
    "TimestampMixin",
    "SelectOption",

    # Catalog
    "OrderStatus",
    "CustomerType",
    "Supplier",
    "Category",
    "Product",
    "ProductCreate",
    "ProductUpdate",
    "Customer",
    "Order",
    "OrderItem",
    "ShippingZone",
    "SupplierOrder",
    "DashboardStats",

    # Notifications
    "Severity",
    "Notification",

    # Import wizard
    "RowStatus",
    "ImportSource",
    "ImportProductPreview",
    "ProductToImport",
    "RowEdit",
    "ImportSearchRequest",
    "InvoicePreviewResponse",
    "EmailPreviewResponse",
    "ExcelPreviewResponse",
    "MayoristaPlataPreviewResponse",
    "InvoiceInfo",
    "EmailInfo",
    "ExcelInfo",
    "ImportProductItem",
    "ExecuteImportRequest",
    "ImportResult",
    "SearchState",
    "CodeCheckState",
    "ImportWizardState",
    "BatchSummary",
    "ReferenceData",
    "ExecutionOutcome",
    "WizardResponse",
]
