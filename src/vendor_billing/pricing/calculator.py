"""
Line-item calculator

Computes a line's total from quantity, unit price and its discounts. The
percentage discount is taken first, then the fixed amount; the result is
clamped so a line never goes negative.
"""

from decimal import Decimal
from typing import Optional

from vendor_billing.models.line_item import LineItem
from vendor_billing.pricing.money import ZERO, Number, money_float, to_decimal


def line_subtotal(quantity: Number, unit_price: Number) -> Decimal:
    """Quantity times unit price, before discounts"""
    return to_decimal(quantity) * to_decimal(unit_price)


def line_total_exact(
    quantity: Number,
    unit_price: Number,
    discount_percent: Optional[Number] = None,
    discount_amount: Optional[Number] = None,
) -> Decimal:
    """Unrounded line total after discounts"""
    total = line_subtotal(quantity, unit_price)

    if discount_percent:
        total -= total * (to_decimal(discount_percent) / 100)
    if discount_amount:
        total -= to_decimal(discount_amount)

    return max(ZERO, total)


def line_total(
    quantity: Number,
    unit_price: Number,
    discount_percent: Optional[Number] = None,
    discount_amount: Optional[Number] = None,
) -> float:
    """
    Line total after discounts, rounded to two decimals

    Args:
        quantity: Number of units
        unit_price: Price per unit
        discount_percent: Percentage discount (0-100), applied first
        discount_amount: Fixed discount, applied after the percentage

    Returns:
        Line total, never negative
    """
    return money_float(
        line_total_exact(quantity, unit_price, discount_percent, discount_amount)
    )


def line_discount(
    quantity: Number,
    unit_price: Number,
    discount_percent: Optional[Number] = None,
    discount_amount: Optional[Number] = None,
) -> Decimal:
    """Value removed from the line by its discounts"""
    return line_subtotal(quantity, unit_price) - line_total_exact(
        quantity, unit_price, discount_percent, discount_amount
    )


def item_total_exact(item: LineItem) -> Decimal:
    """Unrounded total of a line item"""
    return line_total_exact(
        item.quantity, item.unit_price, item.discount_percent, item.discount_amount
    )


def item_total(item: LineItem) -> float:
    """Rounded total of a line item"""
    return money_float(item_total_exact(item))
