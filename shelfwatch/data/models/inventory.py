from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class InventoryItem(BaseModel):
    """An item tracked for a user; unique by (user_id, item_name)."""
    item_id: str = Field(description="Unique item identifier")
    user_id: str = Field(description="Owning user")
    item_name: str = Field(description="Item name as counted")
    created_at: datetime = Field(description="When the item was first seen")


class InventoryPhoto(BaseModel):
    """A shelf photo (or manual-log placeholder) that counts are attached to."""
    photo_id: str = Field(description="Unique photo identifier")
    user_id: str = Field(description="Owning user")
    storage_path: str = Field(description="Where the image is stored, or a manual-log marker")
    description: Optional[str] = Field(default=None, description="Free-text description")
    analysis_data: Dict[str, Any] = Field(default_factory=dict, description="Parsed items and raw vision output")
    created_at: datetime = Field(description="Upload timestamp")


class InventoryCount(BaseModel):
    """A persisted count row."""
    count_id: str = Field(description="Unique count identifier")
    item_id: str = Field(description="Counted item")
    photo_id: str = Field(description="Photo the count came from")
    quantity: int = Field(ge=0, description="Counted quantity")
    confidence_score: float = Field(default=1.0, ge=0.0, le=1.0, description="Vision confidence")
    created_at: datetime = Field(description="Count timestamp")
