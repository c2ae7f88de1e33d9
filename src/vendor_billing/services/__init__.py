"""Services module initialization"""

from vendor_billing.services.pricing_service import (
    PricedDocument,
    PricedLine,
    PricingContext,
    PricingService,
)

__all__ = [
    "PricedDocument",
    "PricedLine",
    "PricingContext",
    "PricingService",
]
