"""
Paginated search against an external source.

Pages have a fixed size; a page shorter than that size ends the results.
A failed "load more" leaves the rows as they were and rolls the page back.
"""

from typing import Optional
import structlog

from exceptions import StepBlockedError
from integrations.catalog_api import CatalogAPIClient, get_catalog_client
from integrations.notifications import Notifier
from models.import_wizard import ImportSearchRequest, ImportWizardState, SearchState
from services.wizard_service import invalidated_checks
from utils.import_mappers import map_search_result

logger = structlog.get_logger(__name__)


class ImportSearchService:
    """
    Search business logic.

    Wraps the API search call with page bookkeeping on the wizard state.
    """

    def __init__(self, client: Optional[CatalogAPIClient] = None):
        self.client = client or get_catalog_client()

    def _fetch(self, state: ImportWizardState, search: SearchState) -> list:
        request = ImportSearchRequest(
            source=state.source.id,
            search=search.query or None,
            category=search.category or None,
            page=search.page,
            page_size=search.page_size,
        )
        results = self.client.imports.search(request)
        return [map_search_result(item) for item in results]

    def start_search(
        self,
        state: ImportWizardState,
        notifier: Notifier,
        query: Optional[str] = None,
        category: Optional[str] = None
    ) -> ImportWizardState:
        """
        Run a new search from page 1 and replace the batch.

        On failure the batch and page are left untouched and an error toast
        is raised.

        Raises:
            StepBlockedError: no source selected
        """
        if state.source is None:
            raise StepBlockedError(state.current_step, "Select an import source first")

        search = SearchState(
            query=query,
            category=category,
            page=1,
            page_size=state.search.page_size,
            loading=True,
        )

        logger.info(
            "import_search_started",
            source=state.source.id,
            query=query,
            category=category
        )

        try:
            rows = self._fetch(state, search)
        except Exception as e:
            logger.error("import_search_failed", source=state.source.id, error=str(e))
            notifier.error(e)
            return state

        has_more = len(rows) == search.page_size

        logger.info("import_search_complete", rows=len(rows), has_more=has_more)

        return state.model_copy(update={
            "rows": tuple(rows),
            "code_check": invalidated_checks(state),
            "search": search.model_copy(update={"has_more": has_more, "loading": False}),
        })

    def load_more(self, state: ImportWizardState, notifier: Notifier) -> ImportWizardState:
        """
        Fetch the next page and append it.

        Does nothing when the last page was short or a load is in flight.
        On failure the page counter goes back to its previous value and the
        rows already shown stay as they are.
        """
        search = state.search
        if state.source is None or not search.has_more or search.loading:
            return state

        next_search = search.model_copy(update={"page": search.page + 1, "loading": True})

        try:
            rows = self._fetch(state, next_search)
        except Exception as e:
            logger.error(
                "import_load_more_failed",
                source=state.source.id,
                page=next_search.page,
                error=str(e)
            )
            notifier.error(e)
            return state.model_copy(update={
                "search": next_search.model_copy(update={"page": search.page, "loading": False})
            })

        has_more = len(rows) == search.page_size

        logger.info(
            "import_page_loaded",
            page=next_search.page,
            rows=len(rows),
            has_more=has_more
        )

        return state.model_copy(update={
            "rows": state.rows + tuple(rows),
            "search": next_search.model_copy(update={"has_more": has_more, "loading": False}),
        })


# Singleton instance for convenience
_search_service: Optional[ImportSearchService] = None

def get_import_search_service() -> ImportSearchService:
    """Get or create ImportSearchService instance."""
    global _search_service
    if _search_service is None:
        _search_service = ImportSearchService()
    return _search_service
