from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

OrderStatus = Literal["draft", "approved", "ordered", "shipped", "received", "cancelled"]


class OrderLine(BaseModel):
    item_name: str = Field(description="Item ordered")
    quantity: int = Field(gt=0, description="Units ordered")
    unit_price: float = Field(default=0.0, ge=0, description="Price per unit")


class DraftOrder(BaseModel):
    """An order awaiting user approval."""
    user_id: str = Field(description="Owning user")
    photo_id: Optional[str] = Field(default=None, description="Photo that triggered the order")
    supplier_id: Optional[str] = Field(default=None, description="Supplier on record, if any")
    supplier_name: str = Field(description="Supplier the order is addressed to")
    items: List[OrderLine] = Field(description="Order lines")
    status: OrderStatus = Field(default="draft", description="Order lifecycle status")
    total_cost: float = Field(ge=0, description="Total order cost")
    currency: str = Field(default="USD", description="Order currency")
    notes: Optional[str] = Field(default=None, description="Reasoning behind the order")
    approval_required: bool = Field(default=True, description="Needs a human to approve")
    expected_delivery_date: Optional[date] = Field(default=None, description="Delivery date if ordered today")


class OrderRecord(DraftOrder):
    """A draft order as stored."""
    order_id: str = Field(description="Unique order identifier")
    created_at: datetime = Field(description="Creation timestamp")
