"""
Vendor Billing SDK for Python

Pricing, tax resolution and document numbering for vendor quotations
and invoices, plus a client for the vendor billing API
"""

from vendor_billing.exceptions import (
    ApiError,
    BillingError,
    BillingErrorCategory,
    ConfigError,
    DocumentStateError,
    NetworkError,
    ValidationError,
)

# Configuration
from vendor_billing.config import (
    BillingConfig,
    PartialBillingConfig,
    ConfigLoader,
    ConfigValidator,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)

# Models
from vendor_billing.models import (
    ApiResponse,
    DocumentKind,
    DocumentNumberCounter,
    DocumentTotals,
    Invoice,
    InvoiceStatus,
    ItemType,
    ItemUnit,
    LineItem,
    Quotation,
    QuotationStatus,
    ServiceType,
    TaxExemption,
    TaxRate,
    TaxRateType,
    VendorBillingSettings,
    VendorTaxSetting,
)

# Pricing core
from vendor_billing.pricing import (
    TaxResolver,
    aggregate,
    applicable_taxes,
    generate_document_number,
    line_total,
)
from vendor_billing.services import PricingContext, PricingService

# HTTP Client
from vendor_billing.client import (
    BillingClient,
    CircuitBreakerConfig,
    CircuitState,
    HttpClient,
    HttpRequestOptions,
    require_success,
)
from vendor_billing.utils import configure_logging

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "ApiError",
    "BillingError",
    "BillingErrorCategory",
    "ConfigError",
    "DocumentStateError",
    "NetworkError",
    "ValidationError",
    # Configuration
    "BillingConfig",
    "PartialBillingConfig",
    "ConfigLoader",
    "ConfigValidator",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    # Models
    "ApiResponse",
    "DocumentKind",
    "DocumentNumberCounter",
    "DocumentTotals",
    "Invoice",
    "InvoiceStatus",
    "ItemType",
    "ItemUnit",
    "LineItem",
    "Quotation",
    "QuotationStatus",
    "ServiceType",
    "TaxExemption",
    "TaxRate",
    "TaxRateType",
    "VendorBillingSettings",
    "VendorTaxSetting",
    # Pricing
    "TaxResolver",
    "aggregate",
    "applicable_taxes",
    "generate_document_number",
    "line_total",
    "PricingContext",
    "PricingService",
    # Client
    "BillingClient",
    "CircuitBreakerConfig",
    "CircuitState",
    "HttpClient",
    "HttpRequestOptions",
    "require_success",
    "configure_logging",
]
