"""
Tax Resolver Unit Tests
"""

from datetime import date
from decimal import Decimal

import pytest

from vendor_billing.models import (
    ServiceType,
    TaxCalculationInput,
    TaxExemption,
    TaxExemptionType,
    TaxRate,
    TaxRateType,
    VendorTaxSetting,
)
from vendor_billing.pricing import (
    TaxResolver,
    applicable_taxes,
    calculate_tax_amount,
    exemption_applies,
    rate_in_effect,
    tax_applies,
)


def _codes(lines) -> list:
    return [line.tax_code for line in lines]


class TestApplicableTaxes:
    """Tests for applicable_taxes"""

    def test_accommodation_foreigner(self, platform_rates, issue_date):
        """Should apply every accommodation tax, ordered by sort order"""
        lines = applicable_taxes(
            ServiceType.ACCOMMODATION,
            1000,
            platform_rates,
            is_foreigner=True,
            multiplier=3,
            on_date=issue_date,
        )

        assert _codes(lines) == ["SC", "TGST", "GT"]
        by_code = {line.tax_code: line for line in lines}
        assert by_code["SC"].amount == 100.0
        assert by_code["SC"].is_inclusive is True
        assert by_code["TGST"].amount == 120.0
        assert by_code["TGST"].is_inclusive is False
        assert by_code["GT"].amount == 18.0

    def test_service_type_filter(self, platform_rates, issue_date):
        """Should leave out taxes that do not list the service type"""
        lines = applicable_taxes(
            ServiceType.TOUR, 500, platform_rates, on_date=issue_date
        )
        assert _codes(lines) == ["SC"]

    def test_accepts_plain_string_service(self, platform_rates, issue_date):
        lines = applicable_taxes("tour", 500, platform_rates, on_date=issue_date)
        assert _codes(lines) == ["SC"]

    def test_no_applicable_rates(self, platform_rates, issue_date):
        """Should return an empty list, not raise"""
        assert applicable_taxes(
            ServiceType.TRANSFER, 100, platform_rates, on_date=issue_date
        ) == []
        assert applicable_taxes(ServiceType.ACCOMMODATION, 100, []) == []

    def test_foreigner_only_for_local_guest(self, platform_rates, issue_date):
        """Should skip foreigner-only taxes for local guests"""
        lines = applicable_taxes(
            ServiceType.ACCOMMODATION,
            1000,
            platform_rates,
            is_foreigner=False,
            on_date=issue_date,
        )
        assert "GT" not in _codes(lines)
        assert "TGST" in _codes(lines)

    def test_vendor_override_rate(self, tgst, issue_date):
        """Should report the vendor's override instead of the platform rate"""
        settings = [VendorTaxSetting(tax_rate_id=tgst.id, is_enabled=True, override_rate=8)]
        lines = applicable_taxes(
            ServiceType.ACCOMMODATION, 1000, [tgst], settings, on_date=issue_date
        )

        assert len(lines) == 1
        assert lines[0].rate == 8
        assert lines[0].amount == 80.0

    def test_vendor_setting_without_override(self, tgst, issue_date):
        """Should keep the platform rate when no override is given"""
        settings = [VendorTaxSetting(tax_rate_id=tgst.id, is_enabled=True)]
        lines = applicable_taxes(
            ServiceType.ACCOMMODATION, 1000, [tgst], settings, on_date=issue_date
        )
        assert lines[0].rate == 12

    def test_vendor_disabled(self, tgst, issue_date):
        """Should drop a tax the vendor has disabled"""
        settings = [VendorTaxSetting(tax_rate_id=tgst.id, is_enabled=False)]
        assert applicable_taxes(
            ServiceType.ACCOMMODATION, 1000, [tgst], settings, on_date=issue_date
        ) == []

    def test_vendor_enables_inactive_rate(self, tgst, issue_date):
        """Should let a vendor setting take precedence over the platform flag"""
        inactive = tgst.model_copy(update={"is_active": False})

        assert applicable_taxes(
            ServiceType.ACCOMMODATION, 100, [inactive], on_date=issue_date
        ) == []

        settings = [VendorTaxSetting(tax_rate_id=tgst.id, is_enabled=True)]
        lines = applicable_taxes(
            ServiceType.ACCOMMODATION, 100, [inactive], settings, on_date=issue_date
        )
        assert _codes(lines) == ["TGST"]

    def test_nationality_exemption(self, platform_rates, issue_date):
        """Should waive a tax for an exempt nationality only"""
        exemptions = [TaxExemption(
            tax_rate_id="tax-tgst",
            exemption_type=TaxExemptionType.GUEST_NATIONALITY,
            conditions={"nationalities": ["MV"]},
        )]

        exempt = applicable_taxes(
            ServiceType.ACCOMMODATION,
            1000,
            platform_rates,
            exemptions=exemptions,
            guest_nationality="MV",
            on_date=issue_date,
        )
        assert "TGST" not in _codes(exempt)

        charged = applicable_taxes(
            ServiceType.ACCOMMODATION,
            1000,
            platform_rates,
            exemptions=exemptions,
            guest_nationality="DE",
            on_date=issue_date,
        )
        assert "TGST" in _codes(charged)

    def test_exemption_only_waives_its_own_tax(self, platform_rates, issue_date):
        exemptions = [TaxExemption(
            tax_rate_id="tax-green",
            exemption_type=TaxExemptionType.BOOKING_TYPE,
            conditions={"booking_types": ["diplomatic"]},
        )]
        lines = applicable_taxes(
            ServiceType.ACCOMMODATION,
            1000,
            platform_rates,
            exemptions=exemptions,
            booking_type="diplomatic",
            on_date=issue_date,
        )
        assert _codes(lines) == ["SC", "TGST"]

    def test_rate_outside_effective_window(self, tgst, issue_date):
        """Should skip rates not yet or no longer in effect"""
        future = tgst.model_copy(update={"effective_from": date(2025, 4, 1)})
        expired = tgst.model_copy(update={"effective_to": date(2025, 3, 14)})
        current = tgst.model_copy(update={
            "effective_from": date(2025, 3, 15),
            "effective_to": date(2025, 3, 15),
        })

        for rate in (future, expired):
            assert applicable_taxes(
                ServiceType.ACCOMMODATION, 100, [rate], on_date=issue_date
            ) == []
        assert len(applicable_taxes(
            ServiceType.ACCOMMODATION, 100, [current], on_date=issue_date
        )) == 1

    def test_no_service_type_skips_applies_to(self, tgst, issue_date):
        """Should apply an explicitly chosen rate regardless of service"""
        lines = applicable_taxes(None, 100, [tgst], on_date=issue_date)
        assert _codes(lines) == ["TGST"]

    def test_no_service_type_keeps_foreigner_rule(self, green_tax, issue_date):
        """Should still skip foreigner-only rates for local guests"""
        enabled = [VendorTaxSetting(tax_rate_id=green_tax.id, is_enabled=True)]

        local = applicable_taxes(
            None, 100, [green_tax], enabled, is_foreigner=False, on_date=issue_date
        )
        foreign = applicable_taxes(
            None, 100, [green_tax], enabled, is_foreigner=True, on_date=issue_date
        )

        assert local == []
        assert _codes(foreign) == [green_tax.code]

    def test_amounts_rounded(self, tgst, issue_date):
        lines = applicable_taxes(
            ServiceType.ACCOMMODATION, "10.05", [tgst], on_date=issue_date
        )
        # 10.05 * 12% = 1.206
        assert lines[0].amount == 1.21


class TestTaxApplies:
    """Tests for tax_applies and rate_in_effect"""

    def test_service_match(self, tgst):
        assert tax_applies(tgst, ServiceType.ACCOMMODATION) is True
        assert tax_applies(tgst, ServiceType.TOUR) is False

    def test_foreigner_only(self, green_tax):
        assert tax_applies(green_tax, "accommodation", is_foreigner=True) is True
        assert tax_applies(green_tax, "accommodation", is_foreigner=False) is False

    def test_open_window(self, tgst):
        assert rate_in_effect(tgst, date(1999, 1, 1)) is True

    def test_parses_iso_datetimes(self):
        """Should accept backend datetimes for date fields"""
        rate = TaxRate(
            id="r",
            name="R",
            code="R",
            rate=1,
            effective_from="2025-01-01T00:00:00Z",
            effective_to="",
        )
        assert rate.effective_from == date(2025, 1, 1)
        assert rate.effective_to is None


class TestExemptionApplies:
    """Tests for exemption_applies"""

    @pytest.fixture
    def promo(self) -> TaxExemption:
        return TaxExemption(
            tax_rate_id="tax-tgst",
            exemption_type=TaxExemptionType.PROMO_CODE,
            conditions={"promo_codes": [" SUMMER25 "]},
            valid_from=date(2025, 3, 1),
            valid_to=date(2025, 3, 31),
        )

    def test_promo_code_case_insensitive(self, promo):
        """Should match promo codes regardless of case and padding"""
        assert exemption_applies(promo, promo_code="summer25", on_date=date(2025, 3, 10))
        assert exemption_applies(promo, promo_code="Summer25 ", on_date=date(2025, 3, 10))
        assert not exemption_applies(promo, promo_code="WINTER", on_date=date(2025, 3, 10))

    def test_promo_code_missing(self, promo):
        assert not exemption_applies(promo, on_date=date(2025, 3, 10))

    def test_validity_window_inclusive(self, promo):
        """Should honour both ends of the validity window"""
        assert exemption_applies(promo, promo_code="SUMMER25", on_date=date(2025, 3, 1))
        assert exemption_applies(promo, promo_code="SUMMER25", on_date=date(2025, 3, 31))
        assert not exemption_applies(promo, promo_code="SUMMER25", on_date=date(2025, 2, 28))
        assert not exemption_applies(promo, promo_code="SUMMER25", on_date=date(2025, 4, 1))

    def test_inactive(self, promo):
        inactive = promo.model_copy(update={"is_active": False})
        assert not exemption_applies(inactive, promo_code="SUMMER25", on_date=date(2025, 3, 10))

    def test_nationality_is_exact(self):
        """Should compare nationality codes exactly"""
        exemption = TaxExemption(
            tax_rate_id="tax-tgst",
            exemption_type=TaxExemptionType.GUEST_NATIONALITY,
            conditions={"nationalities": ["MV"]},
        )
        assert exemption_applies(exemption, nationality="MV")
        assert not exemption_applies(exemption, nationality="mv")
        assert not exemption_applies(exemption, nationality=None)

    def test_booking_type(self):
        exemption = TaxExemption(
            tax_rate_id="tax-tgst",
            exemption_type=TaxExemptionType.BOOKING_TYPE,
            conditions={"booking_types": ["government"]},
        )
        assert exemption_applies(exemption, booking_type="government")
        assert not exemption_applies(exemption, booking_type="leisure")

    def test_empty_conditions(self):
        """Should not match when no condition values are configured"""
        exemption = TaxExemption(
            tax_rate_id="tax-tgst",
            exemption_type=TaxExemptionType.GUEST_NATIONALITY,
        )
        assert not exemption_applies(exemption, nationality="MV")


class TestCalculateTaxAmount:
    """Tests for calculate_tax_amount"""

    def test_percentage(self):
        assert calculate_tax_amount(TaxRateType.PERCENTAGE, 16, 250) == Decimal("40")

    def test_fixed_uses_multiplier(self):
        assert calculate_tax_amount(TaxRateType.FIXED, 5, 999) == Decimal("5")
        assert calculate_tax_amount(TaxRateType.FIXED, 5, 999, multiplier=4) == Decimal("20")

    def test_fixed_per_unit(self):
        assert calculate_tax_amount("fixed_per_unit", 6, 0, multiplier=6) == Decimal("36")

    def test_fixed_per_booking_ignores_multiplier(self):
        """Should charge a per-booking tax once"""
        assert calculate_tax_amount(
            TaxRateType.FIXED_PER_BOOKING, 25, 1000, multiplier=10
        ) == Decimal("25")


class TestTaxResolver:
    """Tests for TaxResolver"""

    @pytest.fixture
    def resolver(self, platform_rates) -> TaxResolver:
        return TaxResolver(
            platform_rates,
            vendor_settings=[
                VendorTaxSetting(tax_rate_id="tax-tgst", is_enabled=True, override_rate=8),
            ],
        )

    def test_get_rate(self, resolver):
        assert resolver.get_rate("tax-tgst").code == "TGST"
        assert resolver.get_rate("missing") is None
        assert len(resolver.rates) == 3

    def test_resolve(self, resolver, issue_date):
        lines = resolver.resolve(
            ServiceType.ACCOMMODATION, 1000, is_foreigner=False, on_date=issue_date
        )
        assert _codes(lines) == ["SC", "TGST"]
        assert lines[1].amount == 80.0

    def test_resolve_rate_unknown_id(self, resolver):
        """Should treat an unknown tax rate reference as untaxed"""
        assert resolver.resolve_rate("deleted-rate", 100) == []
        assert resolver.resolve_rate(None, 100) == []

    def test_resolve_rate(self, resolver, issue_date):
        lines = resolver.resolve_rate("tax-green", 0, multiplier=4, on_date=issue_date)
        assert len(lines) == 1
        assert lines[0].amount == 24.0

    def test_calculate(self, resolver):
        """Should charge per-unit taxes per night per guest"""
        result = resolver.calculate(TaxCalculationInput(
            service_type=ServiceType.ACCOMMODATION,
            amount=1000,
            nights=3,
            guests=2,
        ))

        by_code = {line.tax_code: line for line in result.taxes}
        assert by_code["GT"].amount == 36.0
        assert by_code["TGST"].amount == 80.0
        assert by_code["SC"].amount == 100.0
        # the inclusive service charge is not added
        assert result.total_tax == 116.0
        assert result.total_with_tax == 1116.0
        assert result.taxable_amount == 1000.0
