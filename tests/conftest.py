"""
Shared fixtures
"""

from datetime import date

import pytest

from vendor_billing.models import (
    ServiceType,
    TaxRate,
    TaxRateType,
)


@pytest.fixture
def tgst() -> TaxRate:
    return TaxRate(
        id="tax-tgst",
        name="Tourism Goods and Services Tax",
        code="TGST",
        rate=12,
        rate_type=TaxRateType.PERCENTAGE,
        applies_to=[ServiceType.ACCOMMODATION],
        sort_order=1,
    )


@pytest.fixture
def green_tax() -> TaxRate:
    return TaxRate(
        id="tax-green",
        name="Green Tax",
        code="GT",
        rate=6,
        rate_type=TaxRateType.FIXED_PER_UNIT,
        applies_to=[ServiceType.ACCOMMODATION],
        applies_to_foreigners_only=True,
        sort_order=2,
    )


@pytest.fixture
def service_charge() -> TaxRate:
    return TaxRate(
        id="tax-sc",
        name="Service Charge",
        code="SC",
        rate=10,
        rate_type=TaxRateType.PERCENTAGE,
        applies_to=[ServiceType.ACCOMMODATION, ServiceType.TOUR, ServiceType.ACTIVITY],
        is_inclusive=True,
        sort_order=0,
    )


@pytest.fixture
def platform_rates(tgst, green_tax, service_charge) -> list:
    return [tgst, green_tax, service_charge]


@pytest.fixture
def issue_date() -> date:
    return date(2025, 3, 15)
