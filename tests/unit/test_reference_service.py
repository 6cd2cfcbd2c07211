"""
Unit tests for ReferenceService and lookups.

Run: pytest tests/unit/test_reference_service.py -v
"""

import asyncio

from exceptions import CatalogAPIError
from models.import_wizard import ImportSource
from models.notification import Severity
from services.reference_service import (
    ReferenceService,
    category_name,
    supplier_name,
    supplier_prefix,
)
from tests.factories import make_category, make_supplier


class TestLoadReferenceData:
    """Tests for ReferenceService.load_reference_data()"""

    def test_loads_all_three(self, mock_catalog_client, notifier):
        # Arrange
        mock_catalog_client.imports.get_sources.return_value = [
            ImportSource(id="rainbow-silver", name="Rainbow Silver")
        ]
        mock_catalog_client.suppliers.list.return_value = [make_supplier("sup-1", "Plata Sur")]
        mock_catalog_client.categories.list.return_value = [make_category("cat-1", "Anillos")]
        service = ReferenceService(mock_catalog_client)

        # Act
        data = asyncio.run(service.load_reference_data(notifier))

        # Assert
        assert [s.id for s in data.sources] == ["rainbow-silver"]
        assert data.supplier_options[0].label == "Plata Sur"
        assert data.supplier_options[0].value == "sup-1"
        assert data.category_options[0].label == "Anillos"
        assert notifier.notifications == []

    def test_failure_returns_empty_lists(self, mock_catalog_client, notifier):
        mock_catalog_client.suppliers.list.side_effect = CatalogAPIError("Error 503")
        service = ReferenceService(mock_catalog_client)

        data = asyncio.run(service.load_reference_data(notifier))

        assert data.sources == []
        assert data.suppliers == []
        assert notifier.notifications[0].severity == Severity.ERROR
        assert notifier.notifications[0].detail == "Error 503"


class TestLookups:
    """Tests for supplier_name(), category_name(), supplier_prefix()"""

    def test_names_or_dash(self):
        suppliers = [make_supplier("sup-1", "Plata Sur")]
        categories = [make_category("cat-1", "Anillos")]

        assert supplier_name(suppliers, "sup-1") == "Plata Sur"
        assert supplier_name(suppliers, "missing") == "-"
        assert supplier_name(suppliers, None) == "-"
        assert category_name(categories, "cat-1") == "Anillos"
        assert category_name(categories, "missing") == "-"

    def test_supplier_prefix(self):
        suppliers = [make_supplier("sup-1", "plata sur")]

        assert supplier_prefix(suppliers, "sup-1") == "PL"
        assert supplier_prefix(suppliers, "missing") == "AT"
        assert supplier_prefix(suppliers, None) == "AT"
