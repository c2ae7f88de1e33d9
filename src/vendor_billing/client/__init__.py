"""Client module initialization"""

from vendor_billing.client.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
)
from vendor_billing.client.http_client import (
    HttpAuditEntry,
    HttpClient,
    HttpMethod,
    HttpRequestOptions,
    HttpResponse,
)
from vendor_billing.client.billing_client import (
    BillingClient,
    BillingSettingsApi,
    InvoicesApi,
    QuotationsApi,
    TaxesApi,
    require_success,
)

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    "HttpAuditEntry",
    "HttpClient",
    "HttpMethod",
    "HttpRequestOptions",
    "HttpResponse",
    "BillingClient",
    "BillingSettingsApi",
    "InvoicesApi",
    "QuotationsApi",
    "TaxesApi",
    "require_success",
]
