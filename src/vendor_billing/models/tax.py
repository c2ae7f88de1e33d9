"""Tax rate, vendor setting and exemption models"""

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator


class ServiceType(str, Enum):
    """Service categories a tax can apply to"""
    ACCOMMODATION = "accommodation"
    TOUR = "tour"
    TRANSFER = "transfer"
    RENTAL = "rental"
    ACTIVITY = "activity"


class TaxRateType(str, Enum):
    """How a tax rate is turned into an amount"""
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FIXED_PER_UNIT = "fixed_per_unit"
    FIXED_PER_BOOKING = "fixed_per_booking"


class TaxExemptionType(str, Enum):
    """Condition an exemption is matched on"""
    GUEST_NATIONALITY = "guest_nationality"
    BOOKING_TYPE = "booking_type"
    PROMO_CODE = "promo_code"


TAX_RATE_TYPE_LABELS = {
    TaxRateType.PERCENTAGE: "Percentage",
    TaxRateType.FIXED: "Fixed",
    TaxRateType.FIXED_PER_UNIT: "Fixed Per Unit",
    TaxRateType.FIXED_PER_BOOKING: "Fixed Per Booking",
}

TAX_EXEMPTION_TYPE_LABELS = {
    TaxExemptionType.GUEST_NATIONALITY: "Guest Nationality",
    TaxExemptionType.BOOKING_TYPE: "Booking Type",
    TaxExemptionType.PROMO_CODE: "Promo Code",
}


def _parse_date(value: Any) -> Any:
    """Accept ISO datetimes where only the calendar date matters"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    if value == "":
        return None
    return value


class TaxRate(BaseModel):
    """Platform tax rate"""

    id: str = Field(..., description="Tax rate ID")
    name: str = Field(..., description="Tax name")
    code: str = Field(..., description="Short tax code, e.g. TGST")
    rate: float = Field(..., ge=0, description="Percentage or fixed amount")
    rate_type: TaxRateType = Field(
        default=TaxRateType.PERCENTAGE, description="Rate type"
    )
    applies_to: List[ServiceType] = Field(
        default_factory=list, description="Service types the tax applies to"
    )
    applies_to_foreigners_only: bool = Field(
        default=False, description="Only charged to foreign guests"
    )
    is_inclusive: bool = Field(
        default=False, description="Already included in the stated price"
    )
    is_active: bool = Field(default=True, description="Platform default enablement")
    effective_from: Optional[date] = Field(None, description="First day in effect")
    effective_to: Optional[date] = Field(None, description="Last day in effect")
    show_on_invoice: bool = Field(default=True, description="Print on invoices")
    sort_order: int = Field(default=0, description="Display position")

    @field_validator("effective_from", "effective_to", mode="before")
    @classmethod
    def parse_effective_dates(cls, v: Any) -> Any:
        return _parse_date(v)


class VendorTaxSetting(BaseModel):
    """A vendor's opt-in and rate override for one platform tax"""

    tax_rate_id: str = Field(..., description="Referenced tax rate")
    is_enabled: bool = Field(..., description="Whether the vendor charges the tax")
    override_rate: Optional[float] = Field(
        None, ge=0, description="Replaces the platform rate when set"
    )


class TaxExemptionConditions(BaseModel):
    """Values an exemption matches against"""

    nationalities: Optional[List[str]] = None
    booking_types: Optional[List[str]] = None
    promo_codes: Optional[List[str]] = None


class TaxExemption(BaseModel):
    """Rule that waives a tax when its condition matches"""

    id: Optional[str] = Field(None, description="Exemption ID")
    tax_rate_id: str = Field(..., description="Waived tax rate")
    exemption_type: TaxExemptionType = Field(..., description="Matched condition")
    conditions: TaxExemptionConditions = Field(
        default_factory=TaxExemptionConditions, description="Condition values"
    )
    valid_from: Optional[date] = Field(None, description="First valid day")
    valid_to: Optional[date] = Field(None, description="Last valid day")
    is_active: bool = Field(default=True, description="Exemption enabled")

    @field_validator("valid_from", "valid_to", mode="before")
    @classmethod
    def parse_validity_dates(cls, v: Any) -> Any:
        return _parse_date(v)


class TaxLineResult(BaseModel):
    """One entry of a tax breakdown"""

    tax_id: str = Field(..., description="Tax rate ID")
    tax_name: str = Field(..., description="Tax name")
    tax_code: str = Field(..., description="Tax code")
    rate: float = Field(..., description="Effective rate after vendor override")
    rate_type: TaxRateType = Field(..., description="Rate type")
    amount: float = Field(..., description="Tax amount")
    is_inclusive: bool = Field(..., description="Already embedded in the price")


class TaxCalculationInput(BaseModel):
    """Request for a service-level tax calculation"""

    service_type: ServiceType = Field(..., description="Service being taxed")
    amount: float = Field(..., ge=0, description="Taxable amount")
    guest_nationality: Optional[str] = Field(None, description="ISO country code")
    is_foreigner: bool = Field(default=True, description="Guest is a foreigner")
    nights: int = Field(default=1, ge=0, description="Nights for per-unit taxes")
    guests: int = Field(default=1, ge=0, description="Guests for per-unit taxes")
    booking_type: Optional[str] = Field(None, description="Booking type")
    promo_code: Optional[str] = Field(None, description="Promo code")


class TaxCalculationResult(BaseModel):
    """Result of a service-level tax calculation"""

    taxes: List[TaxLineResult] = Field(default_factory=list)
    total_tax: float = Field(default=0.0, description="Exclusive taxes only")
    total_with_tax: float = Field(default=0.0, description="Amount plus total_tax")
    taxable_amount: float = Field(default=0.0, description="Amount taxed")


# Maldives tax rates, for reference and seeding
MALDIVES_TAX_RATES = {
    "TGST": {
        "name": "Tourism Goods and Services Tax",
        "code": "TGST",
        "rate": 16,
        "rate_type": TaxRateType.PERCENTAGE,
    },
    "GREEN_TAX": {
        "name": "Green Tax",
        "code": "GT",
        "rate": 6,
        "rate_type": TaxRateType.FIXED_PER_UNIT,
    },
    "SERVICE_CHARGE": {
        "name": "Service Charge",
        "code": "SC",
        "rate": 10,
        "rate_type": TaxRateType.PERCENTAGE,
    },
}
