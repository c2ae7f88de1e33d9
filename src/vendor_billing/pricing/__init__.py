"""
Pricing module

Line-item arithmetic, document totals, tax resolution and document
numbering.
"""

from vendor_billing.pricing.money import (
    CURRENCIES,
    currency_symbol,
    format_currency,
    format_tax_rate,
    money_float,
    to_decimal,
    to_money,
)
from vendor_billing.pricing.calculator import (
    item_total,
    item_total_exact,
    line_discount,
    line_subtotal,
    line_total,
    line_total_exact,
)
from vendor_billing.pricing.aggregator import aggregate, exclusive_tax_total
from vendor_billing.pricing.tax_resolver import (
    TaxResolver,
    applicable_taxes,
    calculate_tax_amount,
    exemption_applies,
    rate_in_effect,
    tax_applies,
)
from vendor_billing.pricing.numbering import generate_document_number, preview_counter

__all__ = [
    "CURRENCIES",
    "currency_symbol",
    "format_currency",
    "format_tax_rate",
    "money_float",
    "to_decimal",
    "to_money",
    "item_total",
    "item_total_exact",
    "line_discount",
    "line_subtotal",
    "line_total",
    "line_total_exact",
    "aggregate",
    "exclusive_tax_total",
    "TaxResolver",
    "applicable_taxes",
    "calculate_tax_amount",
    "exemption_applies",
    "rate_in_effect",
    "tax_applies",
    "generate_document_number",
    "preview_counter",
]
