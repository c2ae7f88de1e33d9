"""
Money helpers

Amounts are carried as ``Decimal`` inside the pricing layer and rounded to
two places only when they leave it.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from vendor_billing.models.tax import TaxRateType

Number = Union[int, float, str, Decimal]

MONEY_PLACES = Decimal("0.01")
ZERO = Decimal("0")

CURRENCIES = [
    {"code": "USD", "name": "US Dollar", "symbol": "$"},
    {"code": "EUR", "name": "Euro", "symbol": "€"},
    {"code": "GBP", "name": "British Pound", "symbol": "£"},
    {"code": "MVR", "name": "Maldivian Rufiyaa", "symbol": "Rf"},
    {"code": "AED", "name": "UAE Dirham", "symbol": "د.إ"},
    {"code": "SGD", "name": "Singapore Dollar", "symbol": "S$"},
    {"code": "INR", "name": "Indian Rupee", "symbol": "₹"},
    {"code": "CNY", "name": "Chinese Yuan", "symbol": "¥"},
    {"code": "JPY", "name": "Japanese Yen", "symbol": "¥"},
    {"code": "AUD", "name": "Australian Dollar", "symbol": "A$"},
]

_SYMBOLS = {c["code"]: c["symbol"] for c in CURRENCIES}


def to_decimal(value: Optional[Number]) -> Decimal:
    """Convert a number to Decimal, treating None as zero"""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))


def to_money(value: Optional[Number]) -> Decimal:
    """Round to two decimal places, half up"""
    return to_decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def money_float(value: Optional[Number]) -> float:
    """Round to two decimal places and return a float for output models"""
    return float(to_money(value))


def currency_symbol(currency: str) -> str:
    """Get the display symbol for a currency, falling back to the code"""
    return _SYMBOLS.get(currency, currency)


def format_currency(amount: Number, currency: str) -> str:
    """Format an amount for display, e.g. ``$ 12.50``"""
    return f"{currency_symbol(currency)} {to_money(amount):.2f}"


def format_tax_rate(
    rate: Number, rate_type: TaxRateType, currency: Optional[str] = None
) -> str:
    """Format a tax rate for display"""
    rate_text = f"{to_decimal(rate).normalize():f}"
    rate_type = TaxRateType(rate_type)

    if rate_type == TaxRateType.PERCENTAGE:
        return f"{rate_text}%"
    if rate_type == TaxRateType.FIXED_PER_UNIT:
        return f"{currency} {rate_text}/night" if currency else f"{rate_text}/night"
    return f"{currency} {rate_text}" if currency else rate_text
