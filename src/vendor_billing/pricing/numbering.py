"""
Document number generator

Renders human-readable document numbers such as ``INV-2025-0007`` from a
counter state. Rendering never advances the counter; the backend owns the
increment.
"""

from datetime import date
from typing import Optional

from vendor_billing.exceptions import ValidationError
from vendor_billing.models.billing import DocumentNumberCounter


def generate_document_number(
    prefix: str, next_number: int, year: Optional[int] = None
) -> str:
    """
    Format a document number

    Args:
        prefix: Number prefix, e.g. ``INV``
        next_number: Sequence value, at least 1
        year: Year to embed, defaults to the current year

    Returns:
        ``{prefix}-{year}-{number}`` with the number zero-padded to at
        least 4 digits

    Raises:
        ValidationError: If next_number is below 1
    """
    if next_number < 1:
        raise ValidationError(
            f"next_number must be at least 1, got {next_number}",
            field="next_number",
        )

    if year is None:
        year = date.today().year

    return f"{prefix}-{year}-{next_number:04d}"


def preview_counter(counter: DocumentNumberCounter, year: Optional[int] = None) -> str:
    """Render the number the counter will issue next"""
    return generate_document_number(counter.prefix, counter.next_number, year)
