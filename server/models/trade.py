"""Trade models for TradieQuote.

Trade categories and the static pricing reference data attached to each.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, model_validator

from models.quote import Unit


class TradeType(str, Enum):
    """Coarse occupational category inferred from a job description.

    Declaration order is significant: when two trades score equally during
    detection, the one declared first wins.
    """

    GARDENING = "gardening"
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    PAINTING = "painting"
    HANDYMAN = "handyman"
    ROOFING = "roofing"
    CARPENTRY = "carpentry"
    CONCRETE = "concrete"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        """Capitalized name used in prompts ("Plumbing")."""
        return self.value.capitalize()


class TradePricing(BaseModel):
    """Hourly-rate band and typical inputs for one trade (AUD)."""

    min_hourly_rate: int = Field(..., ge=0, alias="minHourlyRate")
    max_hourly_rate: int = Field(..., ge=0, alias="maxHourlyRate")
    default_hourly_rate: int = Field(..., ge=0, alias="defaultHourlyRate")
    typical_materials: List[str] = Field(default_factory=list, alias="typicalMaterials")
    common_units: List[Unit] = Field(default_factory=list, alias="commonUnits")

    class Config:
        populate_by_name = True
        frozen = True

    @model_validator(mode="after")
    def check_rate_band(self) -> "TradePricing":
        """Default rate must sit inside the min/max band."""
        if not self.min_hourly_rate <= self.default_hourly_rate <= self.max_hourly_rate:
            raise ValueError(
                f"default rate {self.default_hourly_rate} outside "
                f"{self.min_hourly_rate}-{self.max_hourly_rate}"
            )
        return self
