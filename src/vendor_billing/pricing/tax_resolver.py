"""
Tax rate resolver

Decides which platform taxes apply to a service, at what rate, and for
how much. Resolution order for each candidate rate:

1. the rate must list the service type in ``applies_to``
2. a vendor setting, when present, decides enablement and may override
   the rate; otherwise the platform ``is_active`` flag and rate are used
3. disabled rates, foreigner-only rates for local guests and rates
   outside their effective window are dropped
4. a matching active exemption waives the tax entirely
5. the amount is computed from the rate type
6. ``is_inclusive`` is carried through; inclusive taxes are reported
   but never added to the document total

Missing or stale references never raise; they resolve to "no tax".
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple, Union

from vendor_billing.models.tax import (
    ServiceType,
    TaxCalculationInput,
    TaxCalculationResult,
    TaxExemption,
    TaxExemptionType,
    TaxLineResult,
    TaxRate,
    TaxRateType,
    VendorTaxSetting,
)
from vendor_billing.pricing.aggregator import exclusive_tax_total
from vendor_billing.pricing.money import Number, money_float, to_decimal

logger = logging.getLogger(__name__)


def _service_value(service_type: Union[ServiceType, str]) -> str:
    return getattr(service_type, "value", service_type)


def _covers_service(rate: TaxRate, service: str) -> bool:
    return service in [s.value for s in rate.applies_to]


def tax_applies(
    rate: TaxRate,
    service_type: Union[ServiceType, str],
    is_foreigner: bool = True,
) -> bool:
    """Check the service type and foreigner-only restrictions of a rate"""
    if not _covers_service(rate, _service_value(service_type)):
        return False

    if rate.applies_to_foreigners_only and not is_foreigner:
        return False

    return True


def rate_in_effect(rate: TaxRate, on_date: date) -> bool:
    """Check a rate's effective_from/effective_to window (inclusive)"""
    if rate.effective_from and rate.effective_from > on_date:
        return False
    if rate.effective_to and rate.effective_to < on_date:
        return False
    return True


def exemption_applies(
    exemption: TaxExemption,
    nationality: Optional[str] = None,
    booking_type: Optional[str] = None,
    promo_code: Optional[str] = None,
    on_date: Optional[date] = None,
) -> bool:
    """
    Check whether an exemption waives its tax for the given guest/booking

    Nationality and booking type match exactly. Promo codes are compared
    upper-cased. The validity window is inclusive on both ends.
    """
    if not exemption.is_active:
        return False

    on_date = on_date or date.today()
    if exemption.valid_from and exemption.valid_from > on_date:
        return False
    if exemption.valid_to and exemption.valid_to < on_date:
        return False

    conditions = exemption.conditions

    if exemption.exemption_type == TaxExemptionType.GUEST_NATIONALITY:
        return bool(nationality) and nationality in (conditions.nationalities or [])

    if exemption.exemption_type == TaxExemptionType.BOOKING_TYPE:
        return bool(booking_type) and booking_type in (conditions.booking_types or [])

    if exemption.exemption_type == TaxExemptionType.PROMO_CODE:
        if not promo_code:
            return False
        codes = {code.strip().upper() for code in conditions.promo_codes or []}
        return promo_code.strip().upper() in codes

    return False


def calculate_tax_amount(
    rate_type: TaxRateType,
    rate: Number,
    taxable_amount: Number,
    multiplier: Number = 1,
) -> Decimal:
    """
    Compute an unrounded tax amount

    Args:
        rate_type: How the rate is applied
        rate: Percentage or fixed amount
        taxable_amount: Amount a percentage is taken of
        multiplier: Units a fixed tax is charged for (e.g. nights x guests),
            decided by the call site. Ignored for per-booking taxes.
    """
    rate_type = TaxRateType(rate_type)
    rate_value = to_decimal(rate)

    if rate_type == TaxRateType.PERCENTAGE:
        return to_decimal(taxable_amount) * rate_value / 100
    if rate_type == TaxRateType.FIXED_PER_BOOKING:
        return rate_value
    return rate_value * to_decimal(multiplier)


def _effective_rate(
    rate: TaxRate, setting: Optional[VendorTaxSetting]
) -> Optional[float]:
    """Resolve enablement and rate value; None means the tax is off"""
    if setting is not None:
        if not setting.is_enabled:
            return None
        if setting.override_rate is not None:
            return setting.override_rate
        return rate.rate

    return rate.rate if rate.is_active else None


def applicable_taxes(
    service_type: Optional[Union[ServiceType, str]],
    taxable_amount: Number,
    platform_rates: Iterable[TaxRate],
    vendor_settings: Iterable[VendorTaxSetting] = (),
    exemptions: Iterable[TaxExemption] = (),
    *,
    is_foreigner: bool = True,
    guest_nationality: Optional[str] = None,
    booking_type: Optional[str] = None,
    promo_code: Optional[str] = None,
    multiplier: Number = 1,
    on_date: Optional[date] = None,
) -> List[TaxLineResult]:
    """
    Resolve the taxes that apply and compute their amounts

    Args:
        service_type: Service being taxed. None skips the ``applies_to``
            filter, for rates assigned explicitly to a line.
        taxable_amount: Amount percentage taxes are computed on
        platform_rates: Candidate platform tax rates
        vendor_settings: Vendor opt-ins and overrides
        exemptions: Vendor exemptions
        is_foreigner: Guest is a foreigner
        guest_nationality: ISO country code of the guest
        booking_type: Booking type for booking-type exemptions
        promo_code: Promo code for promo-code exemptions
        multiplier: Units for fixed per-unit taxes
        on_date: Date rate windows and exemptions are checked against,
            usually the document issue date. Defaults to today.

    Returns:
        Tax breakdown, sorted by the rates' sort order. Empty when nothing
        applies.
    """
    on_date = on_date or date.today()
    settings: Dict[str, VendorTaxSetting] = {
        s.tax_rate_id: s for s in vendor_settings
    }
    exemptions_by_rate: Dict[str, List[TaxExemption]] = {}
    for exemption in exemptions:
        exemptions_by_rate.setdefault(exemption.tax_rate_id, []).append(exemption)

    service = None if service_type is None else _service_value(service_type)

    resolved: List[Tuple[TaxRate, TaxLineResult]] = []
    for rate in platform_rates:
        if service is not None and not _covers_service(rate, service):
            continue

        effective = _effective_rate(rate, settings.get(rate.id))
        if effective is None:
            continue

        if rate.applies_to_foreigners_only and not is_foreigner:
            continue

        if not rate_in_effect(rate, on_date):
            continue

        waived = any(
            exemption_applies(
                exemption, guest_nationality, booking_type, promo_code, on_date
            )
            for exemption in exemptions_by_rate.get(rate.id, [])
        )
        if waived:
            logger.debug(f"Tax {rate.code} waived by exemption")
            continue

        amount = calculate_tax_amount(
            rate.rate_type, effective, taxable_amount, multiplier
        )
        line = TaxLineResult(
            tax_id=rate.id,
            tax_name=rate.name,
            tax_code=rate.code,
            rate=effective,
            rate_type=rate.rate_type,
            amount=money_float(amount),
            is_inclusive=rate.is_inclusive,
        )
        resolved.append((rate, line))

    resolved.sort(key=lambda pair: (pair[0].sort_order, pair[0].code))
    return [line for _, line in resolved]


class TaxResolver:
    """
    Tax resolver bound to a vendor's tax catalogue

    Holds the platform rates, the vendor's settings and exemptions, and
    resolves taxes against them.

    Example:
        >>> resolver = TaxResolver(rates, settings, exemptions)
        >>> resolver.resolve(ServiceType.ACCOMMODATION, 1000, is_foreigner=True)
    """

    def __init__(
        self,
        platform_rates: Iterable[TaxRate],
        vendor_settings: Optional[Iterable[VendorTaxSetting]] = None,
        exemptions: Optional[Iterable[TaxExemption]] = None,
    ) -> None:
        self._rates: Dict[str, TaxRate] = {r.id: r for r in platform_rates}
        self.vendor_settings: List[VendorTaxSetting] = list(vendor_settings or [])
        self.exemptions: List[TaxExemption] = list(exemptions or [])

    @property
    def rates(self) -> List[TaxRate]:
        """Platform rates in the catalogue"""
        return list(self._rates.values())

    def get_rate(self, tax_rate_id: str) -> Optional[TaxRate]:
        """Look up a platform rate by ID"""
        return self._rates.get(tax_rate_id)

    def resolve(
        self,
        service_type: Union[ServiceType, str],
        taxable_amount: Number,
        **options,
    ) -> List[TaxLineResult]:
        """Resolve every catalogue tax for a service type"""
        return applicable_taxes(
            service_type,
            taxable_amount,
            self._rates.values(),
            self.vendor_settings,
            self.exemptions,
            **options,
        )

    def resolve_rate(
        self,
        tax_rate_id: Optional[str],
        taxable_amount: Number,
        service_type: Optional[Union[ServiceType, str]] = None,
        **options,
    ) -> List[TaxLineResult]:
        """
        Resolve a single explicitly assigned rate

        An unknown ``tax_rate_id`` resolves to no tax since line items may
        reference rates that were since removed.
        """
        if not tax_rate_id:
            return []

        rate = self._rates.get(tax_rate_id)
        if rate is None:
            logger.debug(f"Unknown tax rate {tax_rate_id}, treating as untaxed")
            return []

        return applicable_taxes(
            service_type,
            taxable_amount,
            [rate],
            self.vendor_settings,
            self.exemptions,
            **options,
        )

    def calculate(self, request: TaxCalculationInput) -> TaxCalculationResult:
        """
        Calculate taxes for a service, in the backend's response shape

        Per-unit taxes are charged per night per guest.
        """
        taxes = self.resolve(
            request.service_type,
            request.amount,
            is_foreigner=request.is_foreigner,
            guest_nationality=request.guest_nationality,
            booking_type=request.booking_type,
            promo_code=request.promo_code,
            multiplier=request.nights * request.guests,
        )
        total_tax = exclusive_tax_total(taxes)
        amount = to_decimal(request.amount)

        return TaxCalculationResult(
            taxes=taxes,
            total_tax=money_float(total_tax),
            total_with_tax=money_float(amount + total_tax),
            taxable_amount=money_float(amount),
        )
