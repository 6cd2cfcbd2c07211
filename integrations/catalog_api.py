"""
Back-office REST API client.

Thin typed wrapper over requests: one resource object per entity plus the
import-specific operations. Persistence lives entirely behind this API.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

import requests
import structlog

from config import settings
from exceptions import CatalogAPIError, SessionExpiredError
from models.base import BaseSchema
from models.catalog import (
    Category,
    Customer,
    CustomerCreate,
    CustomerUpdate,
    DashboardStats,
    Order,
    OrderCreate,
    OrderStatus,
    Product,
    ProductCreate,
    ProductUpdate,
    ShippingZone,
    ShippingZoneCreate,
    ShippingZoneUpdate,
    Supplier,
    SupplierCreate,
    SupplierOrder,
    SupplierOrderUpdate,
    SupplierUpdate,
)
from models.import_wizard import (
    EmailPreviewResponse,
    ExcelPreviewResponse,
    ExecuteImportRequest,
    ImportProductPreview,
    ImportResult,
    ImportSearchRequest,
    ImportSource,
    InvoicePreviewResponse,
    MayoristaPlataPreviewResponse,
)

logger = structlog.get_logger(__name__)

Payload = Union[BaseSchema, dict]


@dataclass(frozen=True)
class UploadFile:
    """Raw file forwarded to the API for server-side parsing."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    def as_multipart(self) -> tuple:
        return (self.filename, self.content, self.content_type)


def _body(data: Payload) -> dict:
    if isinstance(data, BaseSchema):
        return data.to_api()
    return data


def _query(filters: dict[str, Any]) -> dict[str, str]:
    """Drop empty filters and render values the way the API expects."""
    params = {}
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, datetime):
            params[key] = value.isoformat()
        elif hasattr(value, "value"):
            params[key] = str(value.value)
        else:
            params[key] = str(value)
    return params


def _error_message(response: requests.Response) -> str:
    """Server message (first one when it sends a list) or the status code."""
    try:
        body = response.json()
    except ValueError:
        body = {}

    message = body.get("message") if isinstance(body, dict) else None
    if isinstance(message, list):
        message = message[0] if message else None
    if message:
        return str(message)
    return f"Error {response.status_code}"


class CatalogAPIClient:
    """
    HTTP client for the back-office API.

    Usage:
        client = get_catalog_client()
        products = client.products.list(active=True)
        result = client.imports.execute(payload)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.base_url = (base_url or settings.catalog_api_url).rstrip("/")
        self.token = token if token is not None else settings.catalog_api_token
        self.timeout = timeout or settings.catalog_api_timeout_seconds
        self.session = session or requests.Session()

        self.suppliers = SuppliersResource(self, "/suppliers", Supplier)
        self.products = ProductsResource(self, "/products", Product)
        self.customers = CustomersResource(self, "/customers", Customer)
        self.orders = OrdersResource(self, "/orders", Order)
        self.shipping_zones = ShippingZonesResource(self, "/shipping-zones", ShippingZone)
        self.supplier_orders = SupplierOrdersResource(self, "/supplier-orders", SupplierOrder)
        self.categories = Resource(self, "/categories", Category)
        self.dashboard = DashboardResource(self)
        self.imports = ImportResource(self)

    def request(
        self,
        method: str,
        path: str,
        json_body: Optional[Any] = None,
        params: Optional[dict] = None,
        files: Optional[dict] = None,
        data: Optional[dict] = None
    ) -> Any:
        """
        Send one request and decode the JSON answer.

        Raises:
            SessionExpiredError: API answered 401
            CatalogAPIError: Any other non-2xx answer or transport failure
        """
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        logger.debug("catalog_api_request", method=method, path=path)

        try:
            response = self.session.request(
                method,
                url,
                json=json_body,
                params=params,
                files=files,
                data=data,
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(
                "catalog_api_request_failed",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise CatalogAPIError(f"No se pudo conectar con la API: {e}", path=path) from e

        if response.status_code == 401:
            logger.warning("catalog_api_session_expired", path=path)
            raise SessionExpiredError(path=path)

        if not response.ok:
            message = _error_message(response)
            logger.error(
                "catalog_api_error",
                method=method,
                path=path,
                status=response.status_code,
                error=message
            )
            raise CatalogAPIError(message, http_status=response.status_code, path=path)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()


class Resource:
    """Generic REST resource: list, get, create, update (PATCH), delete."""

    def __init__(self, client: CatalogAPIClient, path: str, model: type[BaseSchema]):
        self.client = client
        self.path = path
        self.model = model

    def _parse_list(self, rows: Optional[list]) -> list:
        return [self.model.model_validate(row) for row in rows or []]

    def list(self, **filters) -> list:
        rows = self.client.request("GET", self.path, params=_query(filters) or None)
        return self._parse_list(rows)

    def get(self, resource_id: str):
        return self.model.model_validate(
            self.client.request("GET", f"{self.path}/{resource_id}")
        )

    def create(self, data: Payload):
        return self.model.model_validate(
            self.client.request("POST", self.path, json_body=_body(data))
        )

    def update(self, resource_id: str, data: Payload):
        return self.model.model_validate(
            self.client.request("PATCH", f"{self.path}/{resource_id}", json_body=_body(data))
        )

    def delete(self, resource_id: str) -> None:
        self.client.request("DELETE", f"{self.path}/{resource_id}")


class SuppliersResource(Resource):

    def create(self, data: Union[SupplierCreate, dict]) -> Supplier:
        return super().create(data)

    def update(self, resource_id: str, data: Union[SupplierUpdate, dict]) -> Supplier:
        return super().update(resource_id, data)

    def products(self, supplier_id: str) -> list[Product]:
        rows = self.client.request("GET", f"{self.path}/{supplier_id}/products")
        return [Product.model_validate(row) for row in rows or []]


class ProductsResource(Resource):

    def list(
        self,
        active: Optional[bool] = None,
        supplier_id: Optional[str] = None,
        category_id: Optional[str] = None
    ) -> list[Product]:
        return super().list(active=active, supplierId=supplier_id, categoryId=category_id)

    def create(self, data: Union[ProductCreate, dict]) -> Product:
        return super().create(data)

    def update(self, resource_id: str, data: Union[ProductUpdate, dict]) -> Product:
        return super().update(resource_id, data)


class CustomersResource(Resource):

    def create(self, data: Union[CustomerCreate, dict]) -> Customer:
        return super().create(data)

    def update(self, resource_id: str, data: Union[CustomerUpdate, dict]) -> Customer:
        return super().update(resource_id, data)

    def orders(self, customer_id: str) -> list[Order]:
        rows = self.client.request("GET", f"{self.path}/{customer_id}/orders")
        return [Order.model_validate(row) for row in rows or []]


class OrdersResource(Resource):

    def list(
        self,
        status: Optional[OrderStatus] = None,
        customer_id: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> list[Order]:
        return super().list(
            status=status,
            customerId=customer_id,
            **{"from": date_from, "to": date_to}
        )

    def create(self, data: Union[OrderCreate, dict]) -> Order:
        return super().create(data)

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        return Order.model_validate(
            self.client.request(
                "PATCH",
                f"{self.path}/{order_id}/status",
                json_body={"status": OrderStatus(status).value}
            )
        )


class ShippingZonesResource(Resource):

    def create(self, data: Union[ShippingZoneCreate, dict]) -> ShippingZone:
        return super().create(data)

    def update(self, resource_id: str, data: Union[ShippingZoneUpdate, dict]) -> ShippingZone:
        return super().update(resource_id, data)


class SupplierOrdersResource(Resource):
    """Supplier invoices registered by imports."""

    def list(self, supplier_id: Optional[str] = None) -> list[SupplierOrder]:
        return super().list(supplierId=supplier_id)

    def update(self, resource_id: str, data: Union[SupplierOrderUpdate, dict]) -> SupplierOrder:
        return super().update(resource_id, data)


class DashboardResource:

    def __init__(self, client: CatalogAPIClient):
        self.client = client

    def stats(self) -> DashboardStats:
        return DashboardStats.model_validate(self.client.request("GET", "/dashboard/stats") or {})


class ImportResource:
    """Import wizard operations."""

    def __init__(self, client: CatalogAPIClient):
        self.client = client
        self.path = "/import"

    def get_sources(self) -> list[ImportSource]:
        rows = self.client.request("GET", f"{self.path}/sources")
        return [ImportSource.model_validate(row) for row in rows or []]

    def search(self, params: ImportSearchRequest) -> list[ImportProductPreview]:
        body = self.client.request("POST", f"{self.path}/search", json_body=params.to_api())
        rows = body.get("products", []) if isinstance(body, dict) else body
        return [ImportProductPreview.model_validate(row) for row in rows or []]

    def _parse_upload(self, kind: str, file: UploadFile) -> Any:
        logger.info(
            "forwarding_upload",
            kind=kind,
            filename=file.filename,
            size_bytes=len(file.content)
        )
        return self.client.request(
            "POST",
            f"{self.path}/{kind}/parse",
            files={"file": file.as_multipart()}
        )

    def parse_invoice(self, file: UploadFile) -> InvoicePreviewResponse:
        return InvoicePreviewResponse.model_validate(self._parse_upload("invoice", file))

    def parse_email(self, file: UploadFile) -> EmailPreviewResponse:
        return EmailPreviewResponse.model_validate(self._parse_upload("panbubu", file))

    def parse_excel(self, file: UploadFile) -> ExcelPreviewResponse:
        return ExcelPreviewResponse.model_validate(self._parse_upload("excel", file))

    def parse_mayorista_plata(self, file: UploadFile) -> MayoristaPlataPreviewResponse:
        return MayoristaPlataPreviewResponse.model_validate(
            self._parse_upload("mayorista-plata", file)
        )

    def execute(
        self,
        payload: ExecuteImportRequest,
        file: Optional[UploadFile] = None
    ) -> ImportResult:
        """
        Create new products and add stock to existing ones.

        With a file the payload travels as a JSON "data" field of a
        multipart body so the API can store the original document.
        """
        path = f"{self.path}/execute"
        if file is None:
            body = self.client.request("POST", path, json_body=payload.to_api())
        else:
            body = self.client.request(
                "POST",
                path,
                data={"data": json.dumps(payload.to_api())},
                files={"file": file.as_multipart()}
            )
        return ImportResult.model_validate(body or {})

    def check_codes(self, codes: list[str]) -> set[str]:
        """Return the subset of codes that already exist in the catalog."""
        if not codes:
            return set()
        body = self.client.request("POST", f"{self.path}/check-codes", json_body={"codes": codes})
        existing = body.get("existingCodes", []) if isinstance(body, dict) else body
        return set(existing or [])


# Singleton instance for convenience
_catalog_client: Optional[CatalogAPIClient] = None

def get_catalog_client() -> CatalogAPIClient:
    """Get or create CatalogAPIClient instance."""
    global _catalog_client
    if _catalog_client is None:
        _catalog_client = CatalogAPIClient()
    return _catalog_client
