"""Quote models for TradieQuote.

Pydantic models for line items, request context and saved quotes.
Field names are snake_case in Python and camelCase on the wire.
"""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

# Integers stay integers on the wire; 90 is never re-emitted as 90.0
Number = Union[int, float]


class Unit(str, Enum):
    """Billing unit of a line item."""

    HOUR = "hr"
    SQUARE_METRE = "m2"
    ITEM = "item"


VALID_UNITS = frozenset(unit.value for unit in Unit)


class PropertyType(str, Enum):
    """Kind of property the job is on."""

    RESIDENTIAL_HOUSE = "residential-house"
    RESIDENTIAL_UNIT = "residential-unit"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    OTHER = "other"

    @property
    def label(self) -> str:
        return PROPERTY_TYPE_LABELS[self]


class Urgency(str, Enum):
    """How soon the customer wants the work done."""

    ASAP = "asap"
    THIS_WEEK = "this-week"
    NEXT_WEEK = "next-week"
    THIS_MONTH = "this-month"
    FLEXIBLE = "flexible"

    @property
    def label(self) -> str:
        return URGENCY_LABELS[self]


# Every member must have an entry; a missing one raises KeyError on use.
PROPERTY_TYPE_LABELS: Dict[PropertyType, str] = {
    PropertyType.RESIDENTIAL_HOUSE: "Residential House",
    PropertyType.RESIDENTIAL_UNIT: "Residential Unit/Apartment",
    PropertyType.COMMERCIAL: "Commercial Property",
    PropertyType.INDUSTRIAL: "Industrial Property",
    PropertyType.OTHER: "Other Property Type",
}

URGENCY_LABELS: Dict[Urgency, str] = {
    Urgency.ASAP: "ASAP / Emergency (premium pricing may apply)",
    Urgency.THIS_WEEK: "This Week",
    Urgency.NEXT_WEEK: "Next Week",
    Urgency.THIS_MONTH: "This Month",
    Urgency.FLEXIBLE: "Flexible / No Rush",
}


class QuoteItem(BaseModel):
    """One billable line of a quote."""

    label: str = Field(..., min_length=1, description="Customer-facing description")
    qty: Number = Field(..., description="Quantity in the given unit")
    unit: Unit = Field(..., description="Billing unit")
    unit_price: Number = Field(..., alias="unitPrice", description="Whole AUD per unit")

    class Config:
        populate_by_name = True
        use_enum_values = True
        frozen = True

    @property
    def line_total(self) -> Number:
        """qty * unitPrice, unrounded."""
        return self.qty * self.unit_price

    def to_dict(self) -> Dict[str, Union[str, Number]]:
        """Wire representation with camelCase keys."""
        return self.model_dump(by_alias=True)


class QuoteContext(BaseModel):
    """Optional customer context supplied with a job description."""

    customer_name: Optional[str] = Field(default=None, alias="customerName")
    location: Optional[str] = Field(default=None)
    property_type: Optional[PropertyType] = Field(default=None, alias="propertyType")
    urgency: Optional[Urgency] = Field(default=None)

    class Config:
        populate_by_name = True


class GeneratedQuote(BaseModel):
    """Items and notes produced by the generation pipeline."""

    items: List[QuoteItem]
    notes: Optional[str] = None
    is_fallback: bool = Field(default=False, exclude=True)


class QuoteTotals(BaseModel):
    """Whole-dollar totals for a list of items."""

    subtotal: int
    gst: int
    total: int


class Quote(BaseModel):
    """A saved quote, immutable once created.

    Stored under its slug and returned by the share endpoint.
    """

    id: str = Field(..., description="Opaque unique identifier")
    created_at: int = Field(..., alias="createdAt", description="Epoch milliseconds")
    customer_name: Optional[str] = Field(default=None, alias="customerName")
    location: Optional[str] = Field(default=None)
    property_type: Optional[PropertyType] = Field(default=None, alias="propertyType")
    urgency: Optional[Urgency] = Field(default=None)
    job_description: str = Field(..., min_length=1, alias="jobDescription")
    items: List[QuoteItem] = Field(..., min_length=1)
    subtotal: int
    gst: int
    total: int
    notes: Optional[str] = Field(default=None)
    slug: str = Field(..., min_length=1)

    class Config:
        populate_by_name = True
        use_enum_values = True
        frozen = True

    def to_dict(self) -> Dict:
        """Wire representation; absent optional fields are omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
