"""
Centralized user-facing message templates with i18n support.

Usage:
    from integrations.messages import get_message

    detail = get_message("imported_count", imported=12, skipped=3)
"""

from config import settings

MESSAGES = {
    "es": {
        "summary_error": "Error",
        "summary_warning": "Atención",
        "summary_import_success": "Importación completada",
        "summary_item_errors": "Errores",

        "error_generic": "Ha ocurrido un error. Inténtalo de nuevo.",
        "no_products_selected": "No hay productos seleccionados para importar",
        "imported_count": "{imported} productos importados, {skipped} omitidos",
        "item_errors": "{count} productos con errores",
        "invoice_already_imported": "La factura {number} ya fue importada",
        "order_already_imported": "El pedido {number} ya fue importado",
    },
    "en": {
        "summary_error": "Error",
        "summary_warning": "Warning",
        "summary_import_success": "Import complete",
        "summary_item_errors": "Errors",

        "error_generic": "Something went wrong. Please try again.",
        "no_products_selected": "No products selected for import",
        "imported_count": "{imported} products imported, {skipped} skipped",
        "item_errors": "{count} products with errors",
        "invoice_already_imported": "Invoice {number} was already imported",
        "order_already_imported": "Order {number} was already imported",
    },
}


def get_message(key: str, lang: str = None, **kwargs) -> str:
    """
    Get a formatted message in the configured language.

    Args:
        key: Message key from MESSAGES
        lang: Language override (es or en)
        **kwargs: Template placeholders

    Returns:
        Formatted message; falls back to Spanish, then to the key itself
    """
    lang = lang or settings.ui_language
    template = MESSAGES.get(lang, {}).get(key) or MESSAGES["es"].get(key)
    if template is None:
        return key
    try:
        return template.format(**kwargs)
    except KeyError:
        return template
