"""
Unit tests for ImportSearchService.

Run: pytest tests/unit/test_search_service.py -v
"""

import pytest

from exceptions import CatalogAPIError, StepBlockedError
from models.notification import Severity
from services.search_service import ImportSearchService
from tests.factories import SearchResultFactory


class TestStartSearch:
    """Tests for ImportSearchService.start_search()"""

    def test_full_page_means_more(self, search_state, mock_catalog_client, notifier):
        """Should keep has_more when the page is full."""
        # Arrange
        mock_catalog_client.imports.search.return_value = SearchResultFactory.create_batch(50)
        service = ImportSearchService(mock_catalog_client)

        # Act
        result = service.start_search(search_state, notifier, query="ring")

        # Assert
        assert len(result.rows) == 50
        assert result.search.page == 1
        assert result.search.has_more is True
        assert result.search.loading is False
        request = mock_catalog_client.imports.search.call_args.args[0]
        assert request.page == 1
        assert request.page_size == 50
        assert request.search == "ring"

    def test_rows_mapped_for_pricing(self, search_state, mock_catalog_client, notifier):
        """Should select new hits, deselect existing ones and leave prices empty."""
        mock_catalog_client.imports.search.return_value = [
            SearchResultFactory.create(costPriceRaw=7.25),
            SearchResultFactory.create(exists=True),
        ]
        service = ImportSearchService(mock_catalog_client)

        result = service.start_search(search_state, notifier)

        assert result.rows[0].cost_price == 7.25
        assert result.rows[0].selected is True
        assert result.rows[0].price_retail is None
        assert result.rows[1].selected is False

    def test_failure_keeps_batch(self, search_state, mock_catalog_client, notifier):
        mock_catalog_client.imports.search.side_effect = CatalogAPIError("Error 500", http_status=500)
        service = ImportSearchService(mock_catalog_client)

        result = service.start_search(search_state, notifier)

        assert result is search_state
        assert notifier.notifications[0].severity == Severity.ERROR
        assert notifier.notifications[0].detail == "Error 500"

    def test_requires_source(self, wizard_state, mock_catalog_client, notifier):
        service = ImportSearchService(mock_catalog_client)

        with pytest.raises(StepBlockedError):
            service.start_search(wizard_state, notifier)


class TestLoadMore:
    """Tests for ImportSearchService.load_more()"""

    @pytest.fixture
    def first_page_state(self, search_state, mock_catalog_client, notifier):
        mock_catalog_client.imports.search.return_value = SearchResultFactory.create_batch(50)
        return ImportSearchService(mock_catalog_client).start_search(search_state, notifier)

    def test_short_page_ends_results(self, first_page_state, mock_catalog_client, notifier):
        """Should append 37 rows on page 2 and stop offering more."""
        mock_catalog_client.imports.search.return_value = SearchResultFactory.create_batch(37)
        service = ImportSearchService(mock_catalog_client)

        result = service.load_more(first_page_state, notifier)

        assert len(result.rows) == 87
        assert result.search.page == 2
        assert result.search.has_more is False
        assert mock_catalog_client.imports.search.call_args.args[0].page == 2

    def test_failure_rolls_page_back(self, first_page_state, mock_catalog_client, notifier):
        """Should keep page 1 and the loaded rows when page 2 fails."""
        mock_catalog_client.imports.search.side_effect = CatalogAPIError("timeout")
        service = ImportSearchService(mock_catalog_client)

        result = service.load_more(first_page_state, notifier)

        assert result.search.page == 1
        assert result.search.has_more is True
        assert result.search.loading is False
        assert result.rows == first_page_state.rows
        assert len(notifier.notifications) == 1
        assert notifier.notifications[0].severity == Severity.ERROR

    def test_no_more_is_a_no_op(self, search_state, mock_catalog_client, notifier):
        service = ImportSearchService(mock_catalog_client)

        result = service.load_more(search_state, notifier)

        assert result is search_state
        mock_catalog_client.imports.search.assert_not_called()

    def test_load_in_flight_is_a_no_op(self, first_page_state, mock_catalog_client, notifier):
        mock_catalog_client.imports.search.reset_mock()
        loading = first_page_state.model_copy(update={
            "search": first_page_state.search.model_copy(update={"loading": True})
        })
        service = ImportSearchService(mock_catalog_client)

        result = service.load_more(loading, notifier)

        assert result is loading
        mock_catalog_client.imports.search.assert_not_called()
