"""
Document totals aggregator

Folds line items into subtotal, discount and total. Tax is supplied by the
caller (see ``tax_resolver``); inclusive taxes must not be passed in since
they are already part of the stated prices.
"""

from decimal import Decimal
from typing import Iterable, Optional

from vendor_billing.models.document import DocumentTotals
from vendor_billing.models.line_item import LineItem
from vendor_billing.models.tax import TaxLineResult
from vendor_billing.pricing.calculator import item_total_exact, line_subtotal
from vendor_billing.pricing.money import ZERO, Number, to_decimal, to_money


def aggregate(
    items: Iterable[LineItem], tax_amount: Optional[Number] = None
) -> DocumentTotals:
    """
    Sum line items into document totals

    Components are summed unrounded and rounded once. The total is derived
    from the rounded components so that
    ``total == subtotal - discount_amount + tax_amount`` holds exactly.

    Args:
        items: Line items of the document
        tax_amount: Exclusive tax to add, computed by the tax resolver

    Returns:
        DocumentTotals for the items
    """
    subtotal = ZERO
    discount = ZERO

    for item in items:
        gross = line_subtotal(item.quantity, item.unit_price)
        subtotal += gross
        discount += gross - item_total_exact(item)

    subtotal = to_money(subtotal)
    discount = to_money(discount)
    tax = to_money(tax_amount)
    total = max(ZERO, subtotal - discount + tax)

    return DocumentTotals(
        subtotal=float(subtotal),
        discount_amount=float(discount),
        tax_amount=float(tax),
        total=float(total),
    )


def exclusive_tax_total(tax_lines: Iterable[TaxLineResult]) -> Decimal:
    """Sum the tax lines that are added on top of the price"""
    return sum(
        (to_decimal(line.amount) for line in tax_lines if not line.is_inclusive),
        ZERO,
    )
