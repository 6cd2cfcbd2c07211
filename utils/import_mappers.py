"""
Mappers from source responses to wizard rows.

Each source returns its own item shape; all of them become ProductToImport.
Rows already in the catalog start deselected, new ones start selected.
"""

from models.import_wizard import (
    EmailPreviewItem,
    ExcelPreviewItem,
    ImportProductPreview,
    InvoicePreviewItem,
    MayoristaPlataPreviewItem,
    ProductToImport,
)

SILVER = "Silver"


def map_search_result(item: ImportProductPreview) -> ProductToImport:
    """Search hit: cost comes from the raw price, prices left for the user."""
    return ProductToImport(
        **item.model_dump(),
        selected=not item.exists,
        cost_price=item.cost_price_raw,
        price_retail=None,
        price_wholesale=None,
    )


def map_invoice_item(item: InvoicePreviewItem) -> ProductToImport:
    return ProductToImport(
        external_id=item.code,
        code=item.code,
        name=item.name,
        product_type=item.product_type,
        cost_price_raw=item.cost_price,
        cost_price=item.cost_price,
        weight_grams=item.parsed_data.weight,
        metal_type=SILVER,
        size="",
        stock_qty=item.parsed_data.quantity,
        tags=(),
        notes="" if item.found_in_api else "Importado desde PDF",
        image_url=item.image_url or "",
        suggested_category_id=item.suggested_category_id,
        exists=item.exists,
        selected=not item.exists,
        price_retail=item.suggested_retail_price,
        price_wholesale=item.suggested_wholesale_price,
    )


def map_email_item(item: EmailPreviewItem) -> ProductToImport:
    return ProductToImport(
        external_id=item.code,
        code=item.code,
        name=item.name,
        product_type=item.product_type,
        cost_price_raw=item.cost_price,
        cost_price=item.cost_price,
        weight_grams=0,
        metal_type="",
        size=item.size or "",
        stock_qty=item.quantity,
        tags=(),
        notes=item.notes,
        image_url=item.image_url or "",
        suggested_category_id=item.suggested_category_id,
        exists=item.exists,
        selected=not item.exists,
        price_retail=item.suggested_retail_price,
        price_wholesale=item.suggested_wholesale_price,
    )


def map_excel_item(item: ExcelPreviewItem) -> ProductToImport:
    """Excel sheets carry no product name; the code stands in for it."""
    return ProductToImport(
        external_id=item.code,
        code=item.code,
        name=item.code,
        product_type=item.product_type,
        cost_price_raw=item.cost_price,
        cost_price=item.cost_price,
        weight_grams=0,
        metal_type="",
        size=item.size or "",
        stock_qty=item.quantity,
        tags=(),
        notes=item.notes,
        image_url=item.image_data_url or item.image_url or "",
        suggested_category_id=item.suggested_category_id,
        exists=item.exists,
        selected=not item.exists,
        price_retail=item.suggested_retail_price,
        price_wholesale=item.suggested_wholesale_price,
    )


def map_mayorista_plata_item(item: MayoristaPlataPreviewItem) -> ProductToImport:
    """Wholesaler invoices come without images."""
    return ProductToImport(
        external_id=item.code,
        code=item.code,
        name=item.name,
        product_type=item.product_type,
        cost_price_raw=item.cost_price,
        cost_price=item.cost_price,
        weight_grams=0,
        metal_type=SILVER,
        size=item.size or "",
        stock_qty=item.quantity,
        tags=(),
        notes=item.notes,
        image_url="",
        suggested_category_id=item.suggested_category_id,
        exists=item.exists,
        selected=not item.exists,
        price_retail=item.suggested_retail_price,
        price_wholesale=item.suggested_wholesale_price,
    )
