"""Vendor billing settings and document number counters"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class DocumentKind(str, Enum):
    """Document kinds that carry their own number sequence"""
    INVOICE = "invoice"
    QUOTATION = "quotation"
    RECEIPT = "receipt"


class DocumentNumberCounter(BaseModel):
    """
    Counter state for one document kind of one vendor

    The backend owns the increment; this model only mirrors its state.
    """

    prefix: str = Field(..., min_length=1, description="Number prefix, e.g. INV")
    next_number: int = Field(default=1, ge=1, description="Next sequence value")


class VendorBillingSettings(BaseModel):
    """Vendor billing settings"""

    id: Optional[str] = Field(None, description="Settings ID")
    vendor_id: Optional[str] = Field(None, description="Owning vendor")

    invoice_prefix: str = Field(default="INV", min_length=1)
    invoice_next_number: int = Field(default=1, ge=1)
    quotation_prefix: str = Field(default="QUO", min_length=1)
    quotation_next_number: int = Field(default=1, ge=1)
    receipt_prefix: str = Field(default="REC", min_length=1)
    receipt_next_number: int = Field(default=1, ge=1)

    default_currency: str = Field(default="USD", description="Currency code (ISO 4217)")
    default_payment_terms_days: int = Field(default=7, ge=0)
    default_quotation_validity_days: int = Field(default=14, ge=0)

    tax_registration_number: Optional[str] = None
    is_tax_inclusive_pricing: bool = False

    invoice_header: Optional[str] = None
    invoice_footer: Optional[str] = None
    payment_instructions: Optional[str] = None

    bank_name: Optional[str] = None
    bank_account_name: Optional[str] = None
    bank_account_number: Optional[str] = None
    bank_swift_code: Optional[str] = None
    bank_iban: Optional[str] = None

    auto_generate_invoice_on_booking: bool = False
    auto_send_invoice_on_generation: bool = False
    send_payment_reminders: bool = True
    reminder_days_before_due: List[int] = Field(default_factory=lambda: [7, 3, 1])

    def counter(self, kind: DocumentKind) -> DocumentNumberCounter:
        """Get the number counter for a document kind"""
        kind = DocumentKind(kind)
        return DocumentNumberCounter(
            prefix=getattr(self, f"{kind.value}_prefix"),
            next_number=getattr(self, f"{kind.value}_next_number"),
        )
