"""
Document pricing service

Runs line items through the calculator, resolves the tax assigned to each
line and aggregates the document totals.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, TypeVar

from vendor_billing.config.billing_config import BillingConfig
from vendor_billing.models.billing import DocumentKind, VendorBillingSettings
from vendor_billing.models.document import DocumentTotals, Invoice, Quotation
from vendor_billing.models.line_item import LineItem
from vendor_billing.models.tax import ServiceType, TaxLineResult
from vendor_billing.pricing.aggregator import aggregate, exclusive_tax_total
from vendor_billing.pricing.calculator import item_total_exact
from vendor_billing.pricing.money import ZERO, money_float, to_decimal
from vendor_billing.pricing.numbering import preview_counter
from vendor_billing.pricing.tax_resolver import TaxResolver

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", Quotation, Invoice)


@dataclass
class PricingContext:
    """Guest and booking facts taxes depend on"""
    service_type: Optional[ServiceType] = None
    is_foreigner: bool = True
    guest_nationality: Optional[str] = None
    booking_type: Optional[str] = None
    promo_code: Optional[str] = None
    on_date: Optional[date] = None


@dataclass
class PricedLine:
    """A line item with its computed amounts"""
    item: LineItem
    line_total: float
    tax_amount: float = 0.0
    taxes: List[TaxLineResult] = field(default_factory=list)


@dataclass
class PricedDocument:
    """Priced lines, merged tax breakdown and document totals"""
    lines: List[PricedLine]
    taxes: List[TaxLineResult]
    totals: DocumentTotals


class PricingService:
    """
    Prices quotations and invoices

    Each line's ``tax_rate_id`` is resolved against the line total. Fixed
    per-unit taxes are charged per unit of the line's quantity. Inclusive
    taxes appear in the breakdown but are not added to the total.

    Example:
        >>> service = PricingService(TaxResolver(rates, settings, exemptions))
        >>> priced = service.price_items(items, PricingContext(is_foreigner=True))
        >>> priced.totals.total
    """

    def __init__(
        self,
        resolver: Optional[TaxResolver] = None,
        tax_inclusive_pricing: bool = False,
        settings: Optional[VendorBillingSettings] = None,
    ) -> None:
        """
        Args:
            resolver: Tax catalogue to resolve line taxes against. Without
                one, documents are priced untaxed.
            tax_inclusive_pricing: Vendor states all prices tax-inclusive;
                every tax is then reported as inclusive.
            settings: Vendor billing settings that supply number counters
                and the default currency
        """
        self.resolver = resolver or TaxResolver([])
        self.tax_inclusive_pricing = tax_inclusive_pricing
        self.settings = settings or VendorBillingSettings(
            is_tax_inclusive_pricing=tax_inclusive_pricing
        )

    @classmethod
    def from_config(
        cls,
        config: BillingConfig,
        resolver: Optional[TaxResolver] = None,
        settings: Optional[VendorBillingSettings] = None,
    ) -> "PricingService":
        """
        Create a service from the SDK configuration

        Fetched vendor settings win over the configured prefixes, currency
        and tax-inclusive flag. Without them the configuration seeds counters
        that start at 1.
        """
        if settings is None:
            settings = VendorBillingSettings(
                invoice_prefix=config.invoice_prefix,
                quotation_prefix=config.quotation_prefix,
                receipt_prefix=config.receipt_prefix,
                default_currency=config.default_currency,
                is_tax_inclusive_pricing=config.tax_inclusive_pricing,
            )
        return cls(
            resolver,
            tax_inclusive_pricing=settings.is_tax_inclusive_pricing,
            settings=settings,
        )

    def _line_taxes(
        self, item: LineItem, taxable: Decimal, context: PricingContext
    ) -> List[TaxLineResult]:
        taxes = self.resolver.resolve_rate(
            item.tax_rate_id,
            taxable,
            service_type=context.service_type,
            is_foreigner=context.is_foreigner,
            guest_nationality=context.guest_nationality,
            booking_type=context.booking_type,
            promo_code=context.promo_code,
            multiplier=item.quantity,
            on_date=context.on_date,
        )
        if self.tax_inclusive_pricing:
            taxes = [t.model_copy(update={"is_inclusive": True}) for t in taxes]
        return taxes

    def price_items(
        self,
        items: Iterable[LineItem],
        context: Optional[PricingContext] = None,
    ) -> PricedDocument:
        """
        Price a list of line items

        Args:
            items: Line items in display order
            context: Guest and booking facts for tax resolution

        Returns:
            PricedDocument with per-line amounts, the tax breakdown merged
            per tax rate, and the document totals
        """
        context = context or PricingContext()
        items = list(items)

        lines: List[PricedLine] = []
        merged: Dict[str, TaxLineResult] = {}
        merged_amounts: Dict[str, Decimal] = {}

        for item in items:
            total = item_total_exact(item)
            taxes = self._line_taxes(item, total, context)

            for tax in taxes:
                merged_amounts[tax.tax_id] = (
                    merged_amounts.get(tax.tax_id, ZERO) + to_decimal(tax.amount)
                )
                merged.setdefault(tax.tax_id, tax)

            lines.append(PricedLine(
                item=item,
                line_total=money_float(total),
                tax_amount=money_float(exclusive_tax_total(taxes)),
                taxes=taxes,
            ))

        breakdown = [
            tax.model_copy(update={"amount": money_float(merged_amounts[tax_id])})
            for tax_id, tax in merged.items()
        ]
        totals = aggregate(items, exclusive_tax_total(breakdown))

        logger.debug(
            f"Priced {len(items)} line(s): subtotal={totals.subtotal} "
            f"discount={totals.discount_amount} tax={totals.tax_amount} "
            f"total={totals.total}"
        )

        return PricedDocument(lines=lines, taxes=breakdown, totals=totals)

    def price_document(
        self,
        document: DocumentT,
        context: Optional[PricingContext] = None,
    ) -> DocumentT:
        """
        Price a quotation or invoice

        Taxes are evaluated on the document's issue date unless the context
        names another date. A document without an explicit currency takes
        the vendor's default currency. The input document is left untouched.

        Returns:
            A copy of the document with its totals filled in
        """
        context = context or PricingContext()
        if context.on_date is None and document.issue_date is not None:
            context = replace(context, on_date=document.issue_date)

        priced = self.price_items(document.items, context)
        result = document.model_copy(deep=True)
        if "currency" not in document.model_fields_set:
            result.currency = self.settings.default_currency
        result.apply_totals(priced.totals)
        return result

    def preview_number(
        self,
        kind: DocumentKind,
        year: Optional[int] = None,
        settings: Optional[VendorBillingSettings] = None,
    ) -> str:
        """Render the next number for a document kind without consuming it"""
        settings = settings or self.settings
        return preview_counter(settings.counter(kind), year)
