"""
Quotation and invoice models

Both document kinds share the same totals shape. Line items may only be
replaced while a document is in draft.
"""

from datetime import date
from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, Field

from vendor_billing.exceptions import DocumentStateError
from vendor_billing.models.line_item import LineItem


class QuotationStatus(str, Enum):
    """Quotation lifecycle"""
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CONVERTED = "converted"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle"""
    DRAFT = "draft"
    PENDING = "pending"
    SENT = "sent"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"
    VOID = "void"


QUOTATION_STATUS_LABELS = {
    QuotationStatus.DRAFT: "Draft",
    QuotationStatus.SENT: "Sent",
    QuotationStatus.VIEWED: "Viewed",
    QuotationStatus.ACCEPTED: "Accepted",
    QuotationStatus.REJECTED: "Rejected",
    QuotationStatus.EXPIRED: "Expired",
    QuotationStatus.CONVERTED: "Converted",
}

INVOICE_STATUS_LABELS = {
    InvoiceStatus.DRAFT: "Draft",
    InvoiceStatus.PENDING: "Pending",
    InvoiceStatus.SENT: "Sent",
    InvoiceStatus.PARTIAL: "Partially Paid",
    InvoiceStatus.PAID: "Paid",
    InvoiceStatus.OVERDUE: "Overdue",
    InvoiceStatus.CANCELLED: "Cancelled",
    InvoiceStatus.VOID: "Void",
}


class DocumentTotals(BaseModel):
    """Document totals, rounded to two decimals"""

    subtotal: float = Field(default=0.0, description="Sum of quantity x unit price")
    discount_amount: float = Field(default=0.0, description="Value removed by discounts")
    tax_amount: float = Field(default=0.0, description="Exclusive taxes added")
    total: float = Field(default=0.0, description="subtotal - discount + tax")


class _BillingDocument(BaseModel):
    """Fields shared by quotations and invoices"""

    id: Optional[str] = Field(None, description="Document ID")
    vendor_id: Optional[str] = Field(None, description="Owning vendor")
    guest_id: Optional[str] = Field(None, description="Guest reference")
    issue_date: Optional[date] = Field(None, description="Issue date")
    items: List[LineItem] = Field(default_factory=list, description="Line items")
    subtotal: float = Field(default=0.0, description="Subtotal")
    discount_amount: float = Field(default=0.0, description="Total discount")
    tax_amount: float = Field(default=0.0, description="Total exclusive tax")
    total: float = Field(default=0.0, description="Grand total")
    currency: str = Field(default="USD", description="Currency code (ISO 4217)")
    notes: Optional[str] = Field(None, description="Customer-facing notes")

    @property
    def is_editable(self) -> bool:
        return self.status == "draft"

    @property
    def totals(self) -> DocumentTotals:
        return DocumentTotals(
            subtotal=self.subtotal,
            discount_amount=self.discount_amount,
            tax_amount=self.tax_amount,
            total=self.total,
        )

    def replace_items(self, items: List[LineItem]) -> None:
        """
        Replace the document's line items

        Raises:
            DocumentStateError: If the document is no longer a draft
        """
        if not self.is_editable:
            raise DocumentStateError(
                f"Line items cannot be changed once a document is {self.status.value}",
                status=self.status.value,
            )
        self.items = list(items)

    def apply_totals(self, totals: DocumentTotals) -> None:
        """Copy computed totals onto the document"""
        self.subtotal = totals.subtotal
        self.discount_amount = totals.discount_amount
        self.tax_amount = totals.tax_amount
        self.total = totals.total


class Quotation(_BillingDocument):
    """Quotation model"""

    quotation_number: Optional[str] = Field(None, description="Human-readable number")
    status: QuotationStatus = Field(
        default=QuotationStatus.DRAFT, description="Quotation status"
    )
    customer_name: str = Field(default="", description="Customer name")
    customer_email: Optional[str] = Field(None, description="Customer email")
    valid_until: Optional[date] = Field(None, description="Offer expiry date")
    converted_to_booking_id: Optional[str] = Field(
        None, description="Booking created from this quotation"
    )


class Invoice(_BillingDocument):
    """Invoice model"""

    invoice_number: Optional[str] = Field(None, description="Human-readable number")
    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT, description="Invoice status"
    )
    booking_id: Optional[str] = Field(None, description="Invoiced booking")
    quotation_id: Optional[str] = Field(None, description="Source quotation")
    billing_name: str = Field(default="", description="Billed party")
    billing_email: Optional[str] = Field(None, description="Billing email")
    tax_id: Optional[str] = Field(None, description="Customer tax ID")
    due_date: Optional[date] = Field(None, description="Payment due date")
    amount_paid: float = Field(default=0.0, ge=0, description="Payments received")
    void_reason: Optional[str] = Field(None, description="Reason given when voided")

    @property
    def amount_due(self) -> float:
        """Outstanding balance, never negative"""
        return max(0.0, round(self.total - self.amount_paid, 2))


BillingDocument = Union[Quotation, Invoice]


def can_send_quotation(status: QuotationStatus) -> bool:
    return status in (QuotationStatus.DRAFT, QuotationStatus.SENT)


def can_convert_quotation(status: QuotationStatus) -> bool:
    return status == QuotationStatus.ACCEPTED


def can_send_invoice(status: InvoiceStatus) -> bool:
    return status in (
        InvoiceStatus.DRAFT,
        InvoiceStatus.PENDING,
        InvoiceStatus.SENT,
        InvoiceStatus.PARTIAL,
        InvoiceStatus.OVERDUE,
    )


def can_void_invoice(status: InvoiceStatus) -> bool:
    return status not in (InvoiceStatus.VOID, InvoiceStatus.PAID)


def can_record_payment(status: InvoiceStatus) -> bool:
    return status in (
        InvoiceStatus.PENDING,
        InvoiceStatus.SENT,
        InvoiceStatus.PARTIAL,
        InvoiceStatus.OVERDUE,
    )


def is_invoice_overdue(
    due_date: date, status: InvoiceStatus, today: Optional[date] = None
) -> bool:
    """Check whether an unsettled invoice is past its due date"""
    if status in (InvoiceStatus.PAID, InvoiceStatus.VOID, InvoiceStatus.CANCELLED):
        return False
    return due_date < (today or date.today())
