"""Line item models"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ItemType(str, Enum):
    """Kind of billable row"""
    ACCOMMODATION = "accommodation"
    SERVICE = "service"
    FEE = "fee"
    TAX = "tax"
    DISCOUNT = "discount"


class ItemUnit(str, Enum):
    """Unit a line item is priced in"""
    NIGHT = "night"
    PERSON = "person"
    UNIT = "unit"
    TRIP = "trip"
    HOUR = "hour"
    ITEM = "item"


ITEM_TYPE_LABELS = {
    ItemType.ACCOMMODATION: "Accommodation",
    ItemType.SERVICE: "Service",
    ItemType.FEE: "Fee",
    ItemType.TAX: "Tax",
    ItemType.DISCOUNT: "Discount",
}

ITEM_UNIT_LABELS = {
    ItemUnit.NIGHT: "per night",
    ItemUnit.PERSON: "per person",
    ItemUnit.UNIT: "per unit",
    ItemUnit.TRIP: "per trip",
    ItemUnit.HOUR: "per hour",
    ItemUnit.ITEM: "each",
}


class LineItem(BaseModel):
    """One billable row of a quotation or invoice"""

    item_type: ItemType = Field(
        default=ItemType.SERVICE, description="Kind of billable row"
    )
    description: str = Field(default="", description="Item description")
    quantity: float = Field(..., ge=0, description="Quantity")
    unit: ItemUnit = Field(default=ItemUnit.ITEM, description="Pricing unit")
    unit_price: float = Field(..., ge=0, description="Unit price")
    discount_percent: Optional[float] = Field(
        None, ge=0, le=100, description="Percentage discount, applied first"
    )
    discount_amount: Optional[float] = Field(
        None, ge=0, description="Fixed discount, applied after the percentage"
    )
    tax_rate_id: Optional[str] = Field(None, description="Assigned tax rate")
    sort_order: int = Field(default=0, description="Display position")
    resource_id: Optional[str] = Field(None, description="Referenced resource")
    service_id: Optional[str] = Field(None, description="Referenced service")
    booking_id: Optional[str] = Field(None, description="Referenced booking")

    model_config = {
        "str_strip_whitespace": True,
    }
