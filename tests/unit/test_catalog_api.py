"""
Unit tests for CatalogAPIClient.

Run: pytest tests/unit/test_catalog_api.py -v
"""

import json

import pytest
import requests
from unittest.mock import MagicMock

from exceptions import CatalogAPIError, SessionExpiredError
from integrations.catalog_api import CatalogAPIClient, UploadFile
from models.catalog import OrderStatus
from models.import_wizard import ExecuteImportRequest, ImportProductItem, ImportSearchRequest


def _response(status: int = 200, body=None, content: bytes = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    if content is None:
        content = b"" if body is None else json.dumps(body).encode()
    response.content = content
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session) -> CatalogAPIClient:
    return CatalogAPIClient(
        base_url="https://api.example.test/",
        token="tok-123",
        timeout=5,
        session=session
    )


class TestRequest:
    """Tests for CatalogAPIClient.request()"""

    def test_sends_bearer_token_and_timeout(self, client, session):
        session.request.return_value = _response(200, [])

        client.request("GET", "/products")

        args, kwargs = session.request.call_args
        assert args == ("GET", "https://api.example.test/products")
        assert kwargs["headers"]["Authorization"] == "Bearer tok-123"
        assert kwargs["timeout"] == 5

    def test_no_token_no_header(self, session):
        client = CatalogAPIClient(base_url="https://api.example.test", token="", session=session)
        session.request.return_value = _response(200, [])

        client.request("GET", "/products")

        assert "Authorization" not in session.request.call_args.kwargs["headers"]

    def test_401_is_session_expired(self, client, session):
        session.request.return_value = _response(401, {"message": "Unauthorized"})

        with pytest.raises(SessionExpiredError) as exc_info:
            client.request("GET", "/products")

        assert exc_info.value.message == "Sesión expirada"
        assert exc_info.value.status_code == 401

    def test_server_message_used(self, client, session):
        session.request.return_value = _response(400, {"message": "Código duplicado"})

        with pytest.raises(CatalogAPIError) as exc_info:
            client.request("POST", "/products", json_body={})

        assert exc_info.value.message == "Código duplicado"
        assert exc_info.value.http_status == 400

    def test_first_message_of_list_used(self, client, session):
        session.request.return_value = _response(
            422,
            {"message": ["code must not be empty", "name must not be empty"]}
        )

        with pytest.raises(CatalogAPIError) as exc_info:
            client.request("POST", "/products", json_body={})

        assert exc_info.value.message == "code must not be empty"

    def test_status_fallback_message(self, client, session):
        session.request.return_value = _response(500, None, content=b"<html>")

        with pytest.raises(CatalogAPIError) as exc_info:
            client.request("GET", "/products")

        assert exc_info.value.message == "Error 500"

    def test_transport_failure_wrapped(self, client, session):
        session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(CatalogAPIError):
            client.request("GET", "/products")

    def test_no_content_returns_none(self, client, session):
        session.request.return_value = _response(204)

        assert client.request("DELETE", "/products/p-1") is None


class TestResources:
    """Tests for entity resources"""

    def test_products_list_filters(self, client, session):
        session.request.return_value = _response(200, [{
            "id": "p-1",
            "code": "AB-1",
            "name": "Anillo",
            "priceRetail": 25.0,
            "createdAt": "2024-01-01T00:00:00Z",
        }])

        products = client.products.list(active=True, supplier_id="sup-1")

        assert products[0].price_retail == 25.0
        assert session.request.call_args.kwargs["params"] == {
            "active": "true",
            "supplierId": "sup-1",
        }

    def test_update_uses_patch(self, client, session):
        session.request.return_value = _response(200, {"id": "s-1", "name": "Nuevo"})

        supplier = client.suppliers.update("s-1", {"name": "Nuevo"})

        assert session.request.call_args.args[0] == "PATCH"
        assert supplier.name == "Nuevo"

    def test_order_status_update(self, client, session):
        session.request.return_value = _response(200, {
            "id": "o-1",
            "number": "P-1",
            "customerId": "c-1",
            "status": "PAID",
            "createdAt": "2024-01-01T00:00:00Z",
        })

        order = client.orders.update_status("o-1", OrderStatus.PAID)

        assert session.request.call_args.args[1].endswith("/orders/o-1/status")
        assert session.request.call_args.kwargs["json"] == {"status": "PAID"}
        assert order.status == OrderStatus.PAID


class TestImportResource:
    """Tests for ImportResource"""

    def test_search_accepts_wrapped_products(self, client, session):
        session.request.return_value = _response(200, {
            "products": [{"externalId": "x-1", "code": "AB-1", "costPriceRaw": 3.2}]
        })

        rows = client.imports.search(ImportSearchRequest(source="rainbow-silver", page=2))

        assert rows[0].external_id == "x-1"
        body = session.request.call_args.kwargs["json"]
        assert body["page"] == 2
        assert body["pageSize"] == 50

    def test_check_codes_returns_existing_subset(self, client, session):
        session.request.return_value = _response(200, {"existingCodes": ["AB-1"]})

        result = client.imports.check_codes(["AB-1", "CD-2"])

        assert result == {"AB-1"}
        assert session.request.call_args.kwargs["json"] == {"codes": ["AB-1", "CD-2"]}

    def test_check_codes_empty_skips_call(self, client, session):
        assert client.imports.check_codes([]) == set()
        session.request.assert_not_called()

    def test_execute_with_file_is_multipart(self, client, session):
        session.request.return_value = _response(200, {"imported": 1, "skipped": 0, "errors": []})
        payload = ExecuteImportRequest(
            source="rainbow-invoice",
            products=[ImportProductItem(external_id="x", code="AB-1", name="Anillo", price_retail=9.0)],
            save_pdf=True
        )
        upload = UploadFile(filename="f.pdf", content=b"%PDF", content_type="application/pdf")

        result = client.imports.execute(payload, upload)

        kwargs = session.request.call_args.kwargs
        assert kwargs["json"] is None
        assert json.loads(kwargs["data"]["data"])["savePdf"] is True
        assert kwargs["files"] == {"file": ("f.pdf", b"%PDF", "application/pdf")}
        assert result.imported == 1

    def test_parse_invoice_forwards_file(self, client, session):
        session.request.return_value = _response(200, {
            "invoiceNumber": "F-1",
            "items": [{"code": "AB-1", "costPrice": 4.0, "parsedData": {"weight": 2.5, "quantity": 3}}],
        })
        upload = UploadFile(filename="f.pdf", content=b"%PDF")

        preview = client.imports.parse_invoice(upload)

        assert session.request.call_args.args[1].endswith("/import/invoice/parse")
        assert preview.invoice_number == "F-1"
        assert preview.items[0].parsed_data.quantity == 3
