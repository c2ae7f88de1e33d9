"""
Billing Client Unit Tests
"""

import json
from urllib.parse import parse_qs, urlparse

import pytest

from vendor_billing.client import BillingClient, HttpClient, require_success
from vendor_billing.config import BillingConfig
from vendor_billing.exceptions import ApiError
from vendor_billing.models import (
    ApiResponse,
    DocumentKind,
    ServiceType,
    TaxCalculationInput,
    VendorTaxSetting,
)

from tests.unit.fakes import FakeTransport, make_raw_response, make_response


@pytest.fixture
def config() -> BillingConfig:
    return BillingConfig(
        api_url="https://billing.example.com",
        access_token="secret-token",
        retry_attempts=0,
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(make_response(200, {"success": True, "data": {}}))


@pytest.fixture
def client(config, transport, monkeypatch) -> BillingClient:
    http = HttpClient(config)
    monkeypatch.setattr(http._session, "send", transport)
    return BillingClient(config, http_client=http)


def last_request(transport: FakeTransport):
    sent = transport.requests[-1]
    url = urlparse(sent.url)
    body = json.loads(sent.body) if sent.body else None
    return sent.method, url.path, parse_qs(url.query), body


class TestQuotationsApi:
    """Tests for quotation endpoints"""

    def test_list_filters(self, client, transport):
        """Should send only the filters that are set"""
        client.quotations.list(status="sent", page=2, search="")

        method, path, query, _ = last_request(transport)
        assert method == "GET"
        assert path == "/api/vendor/quotations"
        assert query == {"status": ["sent"], "page": ["2"]}

    @pytest.mark.parametrize("call,method,path", [
        (lambda c: c.quotations.get("q1"), "GET", "/api/vendor/quotations/q1"),
        (lambda c: c.quotations.delete("q1"), "DELETE", "/api/vendor/quotations/q1"),
        (lambda c: c.quotations.send("q1"), "POST", "/api/vendor/quotations/q1/send"),
        (lambda c: c.quotations.convert("q1"), "POST", "/api/vendor/quotations/q1/convert"),
    ])
    def test_endpoints(self, client, transport, call, method, path):
        call(client)
        sent_method, sent_path, _, _ = last_request(transport)
        assert (sent_method, sent_path) == (method, path)

    def test_create_dumps_model(self, client, transport):
        """Should serialize pydantic bodies without unset optionals"""
        from vendor_billing.models import LineItem, Quotation

        quotation = Quotation(
            customer_name="A. Guest",
            items=[LineItem(quantity=2, unit_price=80)],
        )
        client.quotations.create(quotation)

        method, path, _, body = last_request(transport)
        assert (method, path) == ("POST", "/api/vendor/quotations")
        assert body["customer_name"] == "A. Guest"
        assert body["status"] == "draft"
        assert "id" not in body
        assert body["items"][0]["unit_price"] == 80

    def test_update(self, client, transport):
        client.quotations.update("q1", {"notes": "late checkout"})

        method, path, _, body = last_request(transport)
        assert (method, path, body) == ("PUT", "/api/vendor/quotations/q1", {"notes": "late checkout"})


class TestInvoicesApi:
    """Tests for invoice endpoints"""

    def test_list_overdue_only(self, client, transport):
        client.invoices.list(overdue_only=True, limit=50)

        _, path, query, _ = last_request(transport)
        assert path == "/api/vendor/invoices"
        assert query == {"overdue_only": ["true"], "limit": ["50"]}

    def test_list_without_filters(self, client, transport):
        client.invoices.list()

        _, _, query, _ = last_request(transport)
        assert query == {}

    def test_void(self, client, transport):
        client.invoices.void("i1", "Duplicate booking")

        method, path, _, body = last_request(transport)
        assert (method, path) == ("POST", "/api/vendor/invoices/i1/void")
        assert body == {"reason": "Duplicate booking"}

    def test_create_from_booking(self, client, transport):
        client.invoices.create_from_booking("b-9")

        method, path, _, _ = last_request(transport)
        assert (method, path) == ("POST", "/api/vendor/invoices/from-booking/b-9")

    def test_send(self, client, transport):
        client.invoices.send("i1")
        assert last_request(transport)[1] == "/api/vendor/invoices/i1/send"

    def test_download_pdf(self, client, transport):
        """Should return the PDF bytes undecoded"""
        pdf = b"%PDF-1.7\n\xe2\xe3\xcf\xd3 binary"
        transport.outcomes = [make_raw_response(200, pdf, "application/pdf")]

        content = client.invoices.download_pdf("i1")

        sent = transport.requests[-1]
        assert content == pdf
        assert sent.method == "GET"
        assert sent.path_url == "/api/vendor/invoices/i1/pdf"
        assert sent.headers["Accept"] == "application/pdf"

    def test_download_pdf_not_found(self, client, transport):
        transport.outcomes = [make_response(404, {
            "success": False,
            "error_message": "Invoice not found",
        })]

        with pytest.raises(ApiError, match="Invoice not found"):
            client.invoices.download_pdf("missing")


class TestSettingsAndTaxes:
    """Tests for billing settings and tax endpoints"""

    def test_fetch_billing_settings(self, client, transport):
        transport.outcomes = [make_response(200, {
            "success": True,
            "data": {"invoice_prefix": "BILL", "invoice_next_number": 12},
        })]

        settings = client.billing_settings.fetch()

        assert settings.invoice_prefix == "BILL"
        assert settings.invoice_next_number == 12
        assert last_request(transport)[1] == "/api/vendor/billing-settings"

    def test_update_tax_settings(self, client, transport):
        client.taxes.update_settings([
            VendorTaxSetting(tax_rate_id="tax-tgst", is_enabled=True, override_rate=8),
            {"tax_rate_id": "tax-green", "is_enabled": False},
        ])

        method, path, _, body = last_request(transport)
        assert (method, path) == ("PUT", "/api/vendor/tax-settings")
        assert body == {"settings": [
            {"tax_rate_id": "tax-tgst", "is_enabled": True, "override_rate": 8.0},
            {"tax_rate_id": "tax-green", "is_enabled": False},
        ]}

    def test_calculate(self, client, transport):
        transport.outcomes = [make_response(200, {
            "success": True,
            "data": {"taxes": [], "total_tax": 0, "total_with_tax": 100, "taxable_amount": 100},
        })]

        result = client.taxes.calculate_result(TaxCalculationInput(
            service_type=ServiceType.TOUR, amount=100
        ))

        method, path, _, body = last_request(transport)
        assert (method, path) == ("POST", "/api/vendor/tax/calculate")
        assert body["service_type"] == "tour"
        assert result.total_with_tax == 100

    def test_fetch_resolver(self, client, transport):
        """Should build a local resolver from rates, vendor settings and exemptions"""
        transport.outcomes = [
            make_response(200, {"success": True, "data": {"tax_rates": [{
                "id": "tax-tgst",
                "name": "TGST",
                "code": "TGST",
                "rate": 12,
                "rate_type": "percentage",
                "applies_to": ["accommodation"],
            }]}}),
            make_response(200, {"success": True, "data": {
                "settings": [
                    {"tax_rate_id": "tax-tgst", "is_enabled": True, "override_rate": 8},
                ],
                "exemptions": [{
                    "id": "ex-mv",
                    "tax_rate_id": "tax-tgst",
                    "exemption_type": "guest_nationality",
                    "conditions": {"nationalities": ["MV"]},
                }],
            }}),
        ]

        resolver = client.taxes.fetch_resolver()

        assert [r.path_url for r in transport.requests] == [
            "/api/vendor/tax-rates",
            "/api/vendor/tax-settings",
        ]
        assert resolver.resolve(ServiceType.ACCOMMODATION, 100)[0].amount == 8.0
        assert resolver.resolve(
            ServiceType.ACCOMMODATION, 100, guest_nationality="MV"
        ) == []

    def test_fetch_resolver_empty_catalogue(self, client, transport):
        transport.outcomes = [
            make_response(200, {"success": True, "data": {"tax_rates": []}}),
            make_response(200, {"success": True, "data": {}}),
        ]

        resolver = client.taxes.fetch_resolver()

        assert resolver.rates == []
        assert resolver.exemptions == []

    def test_fetch_resolver_rejects_list_payload(self, client, transport):
        transport.outcomes = [make_response(200, {"success": True, "data": ["tax-tgst"]})]

        with pytest.raises(ApiError, match="Expected an object"):
            client.taxes.fetch_resolver()

    def test_pricing_service(self, client, transport):
        """Should price with the fetched catalogue and the configured prefixes"""
        transport.outcomes = [
            make_response(200, {"success": True, "data": {"tax_rates": []}}),
            make_response(200, {"success": True, "data": {"settings": []}}),
        ]

        service = client.pricing_service()

        assert len(transport.requests) == 2
        assert service.preview_number(DocumentKind.QUOTATION, 2025) == "QUO-2025-0001"


class TestEnvelope:
    """Tests for envelope handling"""

    def test_parses_envelope(self, client, transport):
        transport.outcomes = [make_response(200, {
            "success": True,
            "data": [{"id": "i1"}],
            "pagination": {"page": 1, "page_size": 20, "total_count": 1, "total_pages": 1},
        })]

        response = client.invoices.list()

        assert isinstance(response, ApiResponse)
        assert response.data == [{"id": "i1"}]
        assert response.pagination.total_count == 1

    def test_require_success(self):
        ok = ApiResponse(success=True, data={})
        assert require_success(ok) is ok

        with pytest.raises(ApiError, match="Invoice already sent"):
            require_success(ApiResponse(success=False, error_message="Invoice already sent"))

    def test_unsuccessful_fetch_raises(self, client, transport):
        transport.outcomes = [make_response(200, {
            "success": False,
            "error_message": "Vendor not found",
        })]

        with pytest.raises(ApiError) as exc_info:
            client.billing_settings.fetch()

        assert exc_info.value.response.error_message == "Vendor not found"

    def test_non_object_body(self, client, transport):
        transport.outcomes = [make_response(200, ["unexpected"])]

        response = client.invoices.get("i1")

        assert response.success is False


class TestAuditWiring:
    """Tests for audit log file wiring"""

    def test_writes_json_lines(self, tmp_path, monkeypatch):
        log_path = tmp_path / "logs" / "audit.log"
        config = BillingConfig(
            api_url="https://billing.example.com",
            access_token="secret-token",
            enable_audit_log=True,
            audit_log_path=str(log_path),
        )
        http = HttpClient(config)
        monkeypatch.setattr(
            http._session, "send", FakeTransport(make_response(200, {"success": True}))
        )

        with BillingClient(config, http_client=http) as client:
            client.quotations.get("q1")
            client.quotations.get("q2")

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        entry = json.loads(lines[0])
        assert entry["method"] == "GET"
        assert entry["url"].endswith("/api/vendor/quotations/q1")
        assert entry["headers"]["Authorization"] == "[REDACTED]"
        assert "secret-token" not in lines[0]

    def test_no_path_no_writer(self, tmp_path):
        config = BillingConfig(enable_audit_log=True)
        client = BillingClient(config)
        assert client.http._audit_log_callback is None
        client.close()
