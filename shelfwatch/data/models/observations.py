from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


def as_utc(ts: datetime) -> datetime:
    """Naive timestamps are taken to be UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


class Observation(BaseModel):
    """One stock count for an item at a point in time."""
    item_name: str = Field(description="Inventory item name")
    quantity: int = Field(ge=0, description="Counted quantity")
    observed_at: datetime = Field(description="When the count was taken (UTC)")

    @field_validator("observed_at")
    @classmethod
    def _normalise_tz(cls, value: datetime) -> datetime:
        return as_utc(value)


class ParsedItem(BaseModel):
    """An item extracted from free-text vision output."""
    name: str = Field(min_length=1, description="Trimmed item name")
    quantity: int = Field(gt=0, description="Positive item quantity")
