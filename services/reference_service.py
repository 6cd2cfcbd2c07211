"""
Reference data for the import wizard: sources, suppliers and categories.

The three lists are independent and fetched concurrently. Lookups by id
return '-' for unknown ids so they can be shown as-is.
"""

import asyncio
from typing import Optional, Sequence
import structlog

from config.import_sources import DEFAULT_SUPPLIER_PREFIX
from integrations.catalog_api import CatalogAPIClient, get_catalog_client
from integrations.notifications import Notifier
from models.base import SelectOption
from models.catalog import Category, Supplier
from models.import_wizard import ReferenceData
from utils.text_utils import name_prefix

logger = structlog.get_logger(__name__)

UNKNOWN = "-"


class ReferenceService:
    """Loads the lookups shown while configuring an import."""

    def __init__(self, client: Optional[CatalogAPIClient] = None):
        self.client = client or get_catalog_client()

    async def load_reference_data(self, notifier: Notifier) -> ReferenceData:
        """
        Fetch sources, suppliers and categories at once.

        If any call fails an error toast is raised and empty lists are
        returned.
        """
        try:
            sources, suppliers, categories = await asyncio.gather(
                asyncio.to_thread(self.client.imports.get_sources),
                asyncio.to_thread(self.client.suppliers.list),
                asyncio.to_thread(self.client.categories.list),
            )
        except Exception as e:
            logger.error("reference_data_load_failed", error=str(e))
            notifier.error(e)
            return ReferenceData()

        logger.info(
            "reference_data_loaded",
            sources=len(sources),
            suppliers=len(suppliers),
            categories=len(categories)
        )

        return ReferenceData(
            sources=sources,
            suppliers=suppliers,
            categories=categories,
            supplier_options=supplier_options(suppliers),
            category_options=category_options(categories),
        )


# ===================
# LOOKUPS
# ===================

def find_supplier(suppliers: Sequence[Supplier], supplier_id: Optional[str]) -> Optional[Supplier]:
    if not supplier_id:
        return None
    return next((s for s in suppliers if s.id == supplier_id), None)


def supplier_name(suppliers: Sequence[Supplier], supplier_id: Optional[str]) -> str:
    supplier = find_supplier(suppliers, supplier_id)
    return supplier.name if supplier and supplier.name else UNKNOWN


def category_name(categories: Sequence[Category], category_id: Optional[str]) -> str:
    if not category_id:
        return UNKNOWN
    category = next((c for c in categories if c.id == category_id), None)
    return category.name if category and category.name else UNKNOWN


def supplier_prefix(suppliers: Sequence[Supplier], supplier_id: Optional[str]) -> str:
    """
    Two-letter prefix for generated codes.

    "Plata Sur" → "PL"; no supplier or unknown id → "AT"
    """
    supplier = find_supplier(suppliers, supplier_id)
    if supplier is None:
        return DEFAULT_SUPPLIER_PREFIX
    return name_prefix(supplier.name, DEFAULT_SUPPLIER_PREFIX)


def supplier_options(suppliers: Sequence[Supplier]) -> list[SelectOption]:
    return [SelectOption(label=s.name, value=s.id) for s in suppliers]


def category_options(categories: Sequence[Category]) -> list[SelectOption]:
    return [SelectOption(label=c.name, value=c.id) for c in categories]


# Singleton instance for convenience
_reference_service: Optional[ReferenceService] = None

def get_reference_service() -> ReferenceService:
    """Get or create ReferenceService instance."""
    global _reference_service
    if _reference_service is None:
        _reference_service = ReferenceService()
    return _reference_service
