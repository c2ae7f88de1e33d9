"""Models module initialization"""

from vendor_billing.models.line_item import (
    LineItem,
    ItemType,
    ItemUnit,
    ITEM_TYPE_LABELS,
    ITEM_UNIT_LABELS,
)
from vendor_billing.models.tax import (
    ServiceType,
    TaxRate,
    TaxRateType,
    VendorTaxSetting,
    TaxExemption,
    TaxExemptionType,
    TaxExemptionConditions,
    TaxLineResult,
    TaxCalculationInput,
    TaxCalculationResult,
    MALDIVES_TAX_RATES,
)
from vendor_billing.models.document import (
    BillingDocument,
    DocumentTotals,
    Invoice,
    InvoiceStatus,
    Quotation,
    QuotationStatus,
    can_convert_quotation,
    can_record_payment,
    can_send_invoice,
    can_send_quotation,
    can_void_invoice,
    is_invoice_overdue,
)
from vendor_billing.models.billing import (
    DocumentKind,
    DocumentNumberCounter,
    VendorBillingSettings,
)
from vendor_billing.models.api import ApiResponse, FieldError, PaginationData

__all__ = [
    "LineItem",
    "ItemType",
    "ItemUnit",
    "ITEM_TYPE_LABELS",
    "ITEM_UNIT_LABELS",
    "ServiceType",
    "TaxRate",
    "TaxRateType",
    "VendorTaxSetting",
    "TaxExemption",
    "TaxExemptionType",
    "TaxExemptionConditions",
    "TaxLineResult",
    "TaxCalculationInput",
    "TaxCalculationResult",
    "MALDIVES_TAX_RATES",
    "BillingDocument",
    "DocumentTotals",
    "Invoice",
    "InvoiceStatus",
    "Quotation",
    "QuotationStatus",
    "can_convert_quotation",
    "can_record_payment",
    "can_send_invoice",
    "can_send_quotation",
    "can_void_invoice",
    "is_invoice_overdue",
    "DocumentKind",
    "DocumentNumberCounter",
    "VendorBillingSettings",
    "ApiResponse",
    "FieldError",
    "PaginationData",
]
