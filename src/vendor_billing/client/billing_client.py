"""
Billing API client
Resource groups for quotations, invoices, billing settings and taxes
"""

import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from vendor_billing.client.http_client import HttpClient, HttpRequestOptions
from vendor_billing.config.billing_config import BillingConfig
from vendor_billing.exceptions import ApiError
from vendor_billing.models.api import ApiResponse
from vendor_billing.models.billing import VendorBillingSettings
from vendor_billing.models.tax import (
    TaxCalculationInput,
    TaxCalculationResult,
    TaxExemption,
    TaxRate,
    VendorTaxSetting,
)
from vendor_billing.pricing.tax_resolver import TaxResolver
from vendor_billing.services.pricing_service import PricingService
from vendor_billing.utils.logger import audit_writer_for


logger = logging.getLogger(__name__)

Body = Union[BaseModel, Dict[str, Any]]


def _dump(body: Optional[Body]) -> Optional[Dict[str, Any]]:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", exclude_none=True)
    return body


def _query(filters: Dict[str, Any]) -> Optional[HttpRequestOptions]:
    params = {k: v for k, v in filters.items() if v is not None and v != ""}
    return HttpRequestOptions(params=params) if params else None


def require_success(response: ApiResponse) -> ApiResponse:
    """
    Return the envelope unchanged when it reports success

    Raises:
        ApiError: If the envelope has success set to false
    """
    if not response.success:
        raise ApiError(response.get_error_message(), response=response)
    return response


def _payload(response: ApiResponse) -> Dict[str, Any]:
    if response.data is None:
        return {}
    if not isinstance(response.data, dict):
        raise ApiError("Expected an object in the response data", response=response)
    return response.data


class _ResourceApi:
    """Shared plumbing for a group of endpoints under one base path"""

    base_path = ""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def _url(self, suffix: str = "") -> str:
        return f"{self.base_path}{suffix}"

    def _parse(self, data: Any) -> ApiResponse:
        if not isinstance(data, dict):
            return ApiResponse(success=False, error_message="Unexpected response body")
        return ApiResponse.model_validate(data)

    def _get(self, suffix: str = "", **filters: Any) -> ApiResponse:
        return self._parse(self._http.get(self._url(suffix), _query(filters)).data)

    def _post(self, suffix: str = "", body: Optional[Body] = None) -> ApiResponse:
        return self._parse(self._http.post(self._url(suffix), _dump(body)).data)

    def _put(self, suffix: str = "", body: Optional[Body] = None) -> ApiResponse:
        return self._parse(self._http.put(self._url(suffix), _dump(body)).data)

    def _delete(self, suffix: str = "") -> ApiResponse:
        return self._parse(self._http.delete(self._url(suffix)).data)


class QuotationsApi(_ResourceApi):
    """Quotation endpoints"""

    base_path = "/api/vendor/quotations"

    def list(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ApiResponse:
        """List quotations matching the given filters"""
        return self._get(
            search=search,
            status=status,
            date_from=date_from,
            date_to=date_to,
            page=page,
            limit=limit,
        )

    def get(self, quotation_id: str) -> ApiResponse:
        return self._get(f"/{quotation_id}")

    def create(self, quotation: Body) -> ApiResponse:
        return self._post(body=quotation)

    def update(self, quotation_id: str, quotation: Body) -> ApiResponse:
        return self._put(f"/{quotation_id}", quotation)

    def delete(self, quotation_id: str) -> ApiResponse:
        return self._delete(f"/{quotation_id}")

    def send(self, quotation_id: str) -> ApiResponse:
        """Email the quotation to the customer and mark it sent"""
        return self._post(f"/{quotation_id}/send")

    def convert(self, quotation_id: str) -> ApiResponse:
        """Convert an accepted quotation into a booking"""
        return self._post(f"/{quotation_id}/convert")


class InvoicesApi(_ResourceApi):
    """Invoice endpoints"""

    base_path = "/api/vendor/invoices"

    def list(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        overdue_only: bool = False,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ApiResponse:
        """List invoices matching the given filters"""
        return self._get(
            search=search,
            status=status,
            date_from=date_from,
            date_to=date_to,
            overdue_only="true" if overdue_only else None,
            page=page,
            limit=limit,
        )

    def get(self, invoice_id: str) -> ApiResponse:
        return self._get(f"/{invoice_id}")

    def create(self, invoice: Body) -> ApiResponse:
        return self._post(body=invoice)

    def update(self, invoice_id: str, invoice: Body) -> ApiResponse:
        return self._put(f"/{invoice_id}", invoice)

    def send(self, invoice_id: str) -> ApiResponse:
        return self._post(f"/{invoice_id}/send")

    def void(self, invoice_id: str, reason: str) -> ApiResponse:
        """
        Void an issued invoice

        Args:
            invoice_id: Invoice identifier
            reason: Reason recorded on the voided invoice
        """
        return self._post(f"/{invoice_id}/void", {"reason": reason})

    def create_from_booking(self, booking_id: str) -> ApiResponse:
        """Create a draft invoice from a confirmed booking"""
        return self._post(f"/from-booking/{booking_id}")

    def download_pdf(self, invoice_id: str) -> bytes:
        """
        Download the rendered invoice as a PDF

        Returns:
            Raw PDF bytes

        Raises:
            ApiError: If the backend answers with an error envelope
        """
        options = HttpRequestOptions(headers={"Accept": "application/pdf"}, raw=True)
        return self._http.get(self._url(f"/{invoice_id}/pdf"), options).data


class BillingSettingsApi(_ResourceApi):
    """Vendor billing settings endpoints"""

    base_path = "/api/vendor/billing-settings"

    def get(self) -> ApiResponse:
        return self._get()

    def update(self, settings: Body) -> ApiResponse:
        return self._put(body=settings)

    def fetch(self) -> VendorBillingSettings:
        """Fetch the settings and parse them into a model"""
        response = require_success(self.get())
        return VendorBillingSettings.model_validate(response.data or {})


class TaxesApi(_ResourceApi):
    """Tax rate, vendor tax setting and tax calculation endpoints"""

    base_path = "/api/vendor"

    def get_rates(self) -> ApiResponse:
        return self._get("/tax-rates")

    def get_settings(self) -> ApiResponse:
        return self._get("/tax-settings")

    def update_settings(
        self, settings: List[Union[VendorTaxSetting, Dict[str, Any]]]
    ) -> ApiResponse:
        """Replace the vendor's tax settings"""
        payload = [_dump(s) for s in settings]
        return self._put("/tax-settings", {"settings": payload})

    def calculate(self, calculation: Union[TaxCalculationInput, Dict[str, Any]]) -> ApiResponse:
        """Ask the backend to calculate taxes for an amount"""
        return self._post("/tax/calculate", calculation)

    def calculate_result(
        self, calculation: Union[TaxCalculationInput, Dict[str, Any]]
    ) -> TaxCalculationResult:
        response = require_success(self.calculate(calculation))
        return TaxCalculationResult.model_validate(response.data or {})

    def fetch_resolver(self) -> TaxResolver:
        """
        Build a local TaxResolver from the platform rates and the
        vendor's settings and exemptions

        The rates endpoint answers ``{"tax_rates": [...]}`` and the settings
        endpoint ``{"settings": [...], "exemptions": [...]}``.

        Returns:
            TaxResolver seeded with the fetched catalogue

        Raises:
            ApiError: If either request is unsuccessful or a payload is
                not an object
        """
        rates_data = _payload(require_success(self.get_rates()))
        settings_data = _payload(require_success(self.get_settings()))

        rates = [TaxRate.model_validate(r) for r in rates_data.get("tax_rates") or []]
        settings = [
            VendorTaxSetting.model_validate(s)
            for s in settings_data.get("settings") or []
        ]
        exemptions = [
            TaxExemption.model_validate(e)
            for e in settings_data.get("exemptions") or []
        ]
        logger.debug(
            f"Loaded {len(rates)} tax rates, {len(settings)} vendor settings "
            f"and {len(exemptions)} exemptions"
        )
        return TaxResolver(rates, vendor_settings=settings, exemptions=exemptions)


class BillingClient:
    """
    Vendor billing API client

    Example:
        >>> config = ConfigLoader().load()
        >>> with BillingClient(config) as client:
        ...     response = client.invoices.list(overdue_only=True)
        ...     for invoice in response.data or []:
        ...         print(invoice["invoice_number"])
    """

    def __init__(
        self,
        config: BillingConfig,
        http_client: Optional[HttpClient] = None,
    ) -> None:
        """
        Create a new billing client

        Args:
            config: Resolved billing configuration
            http_client: Optional pre-built transport
        """
        self.config = config
        self.http = http_client or HttpClient(config)

        if config.enable_audit_log:
            writer = audit_writer_for(config.audit_log_path)
            if writer is not None:
                self.http.set_audit_log_callback(writer)
                logger.info(f"Audit log enabled at {writer.path}")

        self.quotations = QuotationsApi(self.http)
        self.invoices = InvoicesApi(self.http)
        self.billing_settings = BillingSettingsApi(self.http)
        self.taxes = TaxesApi(self.http)

    def pricing_service(
        self,
        resolver: Optional[TaxResolver] = None,
        settings: Optional[VendorBillingSettings] = None,
    ) -> PricingService:
        """
        Build a PricingService for this vendor

        Args:
            resolver: Tax catalogue to price against. Fetched from the API
                when omitted.
            settings: Billing settings used for numbering and tax-inclusive
                pricing. Without them the configured defaults apply.
        """
        if resolver is None:
            resolver = self.taxes.fetch_resolver()
        return PricingService.from_config(self.config, resolver, settings)

    def close(self) -> None:
        """Close the underlying HTTP session"""
        self.http.close()

    def __enter__(self) -> "BillingClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
