"""
Business logic services.

Pure rules for the wizard batch live in module-level functions
(reconciliation, pricing, wizard reducers); anything that talks to the API
is a service class with a get_x_service() singleton.
"""

from services import pricing_service
from services import reconciliation_service
from services import wizard_service
from services.search_service import ImportSearchService, get_import_search_service
from services.code_check_service import (
    CodeCheckService,
    Debouncer,
    get_code_check_service,
)
from services.reference_service import ReferenceService, get_reference_service
from services.upload_service import ImportUploadService, get_import_upload_service
from services.import_execution_service import (
    ImportExecutionService,
    get_import_execution_service,
)

__all__ = [
    "pricing_service",
    "reconciliation_service",
    "wizard_service",
    "ImportSearchService",
    "get_import_search_service",
    "CodeCheckService",
    "Debouncer",
    "get_code_check_service",
    "ReferenceService",
    "get_reference_service",
    "ImportUploadService",
    "get_import_upload_service",
    "ImportExecutionService",
    "get_import_execution_service",
]
