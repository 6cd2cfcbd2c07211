"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project directory to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest
from unittest.mock import MagicMock, patch
from typing import Generator

from config.import_sources import RAINBOW_SILVER
from integrations.notifications import Notifier
from models.import_wizard import ImportSource, ImportWizardState
from services import wizard_service, wizard_session_service


# ===================
# MOCK CATALOG API
# ===================

@pytest.fixture
def mock_catalog_client() -> MagicMock:
    """
    Stand-in for CatalogAPIClient.

    Usage:
        def test_something(mock_catalog_client):
            mock_catalog_client.imports.check_codes.return_value = {"AB-1"}
    """
    client = MagicMock()
    client.imports.check_codes.return_value = set()
    client.imports.search.return_value = []
    return client


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture(autouse=True)
def clear_wizard_sessions() -> Generator:
    """Every test starts with an empty session store."""
    wizard_session_service.clear_sessions()
    yield
    wizard_session_service.clear_sessions()


# ===================
# WIZARD STATE
# ===================

@pytest.fixture
def search_source() -> ImportSource:
    return ImportSource(id=RAINBOW_SILVER, name="Rainbow Silver", product_types=["rings"])


@pytest.fixture
def wizard_state() -> ImportWizardState:
    """Fresh wizard at the source step."""
    return wizard_service.new_state()


@pytest.fixture
def search_state(wizard_state, search_source) -> ImportWizardState:
    """Wizard with the search source chosen and nothing loaded."""
    return wizard_service.select_source(wizard_state, search_source)


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client():
    """
    Create FastAPI test client.

    Usage:
        def test_endpoint(test_client):
            response = test_client.get("/health")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)


@pytest.fixture
def test_client_with_mock_api(mock_catalog_client):
    """
    Create FastAPI test client whose services talk to the mock API.

    Usage:
        def test_endpoint(test_client_with_mock_api, mock_catalog_client):
            mock_catalog_client.imports.search.return_value = [...]
            response = test_client_with_mock_api.post(...)
    """
    from fastapi.testclient import TestClient
    from main import app
    from services.code_check_service import CodeCheckService, Debouncer
    from services.import_execution_service import ImportExecutionService
    from services.reference_service import ReferenceService
    from services.search_service import ImportSearchService
    from services.upload_service import ImportUploadService

    with patch("services.search_service._search_service", ImportSearchService(mock_catalog_client)), \
         patch("services.upload_service._upload_service", ImportUploadService(mock_catalog_client)), \
         patch("services.reference_service._reference_service", ReferenceService(mock_catalog_client)), \
         patch("services.import_execution_service._execution_service", ImportExecutionService(mock_catalog_client)), \
         patch("services.code_check_service._code_check_service",
               CodeCheckService(mock_catalog_client, Debouncer(delay_seconds=60))):
        yield TestClient(app)
