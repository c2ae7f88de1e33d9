"""
Pricing Examples for the Vendor Billing SDK
Demonstrates configuration, local pricing and the API client
"""

from datetime import date
from pathlib import Path

from vendor_billing import (
    BillingClient,
    ConfigLoader,
    DocumentKind,
    Invoice,
    ItemType,
    ItemUnit,
    LineItem,
    PricingContext,
    PricingService,
    ServiceType,
    TaxExemption,
    TaxRate,
    TaxResolver,
    VendorBillingSettings,
    VendorTaxSetting,
    configure_logging,
)
from vendor_billing.models import MALDIVES_TAX_RATES


# =============================================================================
# Example 1: Configuration
# =============================================================================

def load_config():
    """Load configuration from BILLING_* variables plus local overrides"""
    loader = ConfigLoader()
    return loader.load(config={
        "api_url": "http://localhost:8080",
        "enable_audit_log": True,
        "audit_log_path": "./logs/billing-audit.log",
    })


# =============================================================================
# Example 2: Local pricing with a Maldives tax catalogue
# =============================================================================

def build_resolver() -> TaxResolver:
    """Seed a resolver from the reference Maldives rates"""
    tgst = TaxRate(
        id="tax-tgst",
        applies_to=[ServiceType.ACCOMMODATION, ServiceType.TOUR],
        sort_order=1,
        **MALDIVES_TAX_RATES["TGST"],
    )
    green_tax = TaxRate(
        id="tax-green",
        applies_to=[ServiceType.ACCOMMODATION],
        applies_to_foreigners_only=True,
        sort_order=2,
        **MALDIVES_TAX_RATES["GREEN_TAX"],
    )

    return TaxResolver(
        [tgst, green_tax],
        vendor_settings=[
            # Guesthouses on a reduced TGST rate
            VendorTaxSetting(tax_rate_id="tax-tgst", is_enabled=True, override_rate=12),
        ],
        exemptions=[
            TaxExemption(
                tax_rate_id="tax-green",
                exemption_type="booking_type",
                conditions={"booking_types": ["day_visit"]},
            ),
        ],
    )


def price_invoice_example() -> Invoice:
    """Price a draft invoice for a three-night stay"""
    service = PricingService(build_resolver())

    invoice = Invoice(
        issue_date=date.today(),
        billing_name="A. Guest",
        items=[
            LineItem(
                item_type=ItemType.ACCOMMODATION,
                description="Beach villa",
                quantity=3,
                unit=ItemUnit.NIGHT,
                unit_price=180,
                discount_percent=10,
                tax_rate_id="tax-tgst",
            ),
            LineItem(
                item_type=ItemType.FEE,
                description="Green tax",
                quantity=3,
                unit=ItemUnit.NIGHT,
                unit_price=0,
                tax_rate_id="tax-green",
            ),
        ],
    )

    context = PricingContext(
        service_type=ServiceType.ACCOMMODATION,
        is_foreigner=True,
        guest_nationality="DE",
    )
    priced = service.price_document(invoice, context)

    print(f"Subtotal: {priced.subtotal:.2f}")
    print(f"Discount: {priced.discount_amount:.2f}")
    print(f"Tax:      {priced.tax_amount:.2f}")
    print(f"Total:    {priced.total:.2f}")

    return priced


def preview_number_example() -> str:
    """Preview the next invoice number without consuming it"""
    settings = VendorBillingSettings(invoice_prefix="INV", invoice_next_number=7)
    return PricingService(settings=settings).preview_number(DocumentKind.INVOICE)


# =============================================================================
# Example 3: API client
# =============================================================================

def overdue_invoices_example() -> None:
    """List overdue invoices and price against the vendor's live tax setup"""
    config = load_config()

    with BillingClient(config) as client:
        response = client.invoices.list(overdue_only=True)
        for invoice in response.data or []:
            print(invoice.get("invoice_number"), invoice.get("total"))

        service = client.pricing_service(settings=client.billing_settings.fetch())
        print(service.preview_number(DocumentKind.INVOICE))

        pdf = client.invoices.download_pdf("inv-1")
        Path("inv-1.pdf").write_bytes(pdf)


if __name__ == "__main__":
    configure_logging("DEBUG")

    price_invoice_example()
    print(preview_number_example())
