from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class InventoryContext(BaseModel):
    """Stock situation handed to the reasoning collaborator."""
    item_name: str = Field(description="Item to reorder")
    current_quantity: int = Field(description="Latest counted quantity")
    reorder_level: int = Field(description="Reorder threshold")
    minimum_stock: int = Field(description="Minimum stock threshold")
    days_until_stock_out: Optional[int] = Field(default=None, description="Projected days of stock left")
    estimated_daily_usage: float = Field(default=0.0, description="Units consumed per day")


class SupplierOption(BaseModel):
    """A newly found supplier, flattened for the reasoning prompt."""
    name: str = Field(description="Supplier name")
    contact: str = Field(description="Email, phone or 'N/A'")
    location: Optional[str] = Field(default=None, description="Location if known")
    estimated_price: Optional[float] = Field(default=None, description="Indicative unit price")


class SupplierToAdd(BaseModel):
    name: str
    contact: str
    reason: str


class PriceUpdate(BaseModel):
    supplier_name: str
    product_name: str
    current_price: float
    suggested_price: float
    reason: str


class SupplierRecommendations(BaseModel):
    """Whether our supplier records should change."""
    should_add_new_suppliers: bool = Field(default=False)
    suppliers_to_add: List[SupplierToAdd] = Field(default_factory=list)
    should_update_prices: bool = Field(default=False)
    price_updates: List[PriceUpdate] = Field(default_factory=list)


class OrderRecommendation(BaseModel):
    """The concrete purchase the reasoning collaborator proposes."""
    item_name: str = Field(description="Item to order")
    recommended_quantity: int = Field(gt=0, description="Units to order")
    recommended_supplier: str = Field(description="Supplier name")
    supplier_id: Optional[str] = Field(default=None, description="Set when the supplier is already on record")
    unit_price: float = Field(ge=0, description="Price per unit")
    total_cost: float = Field(ge=0, description="Total order cost")
    currency: str = Field(default="USD", description="Price currency")
    lead_time_days: int = Field(default=3, ge=0, description="Expected delivery in days")
    reasoning: str = Field(default="", description="Why this supplier and quantity")


class ProcurementAnalysis(BaseModel):
    """Validated reasoning-collaborator response."""
    supplier_recommendations: SupplierRecommendations
    order_recommendation: OrderRecommendation
    full_reasoning: str = Field(default="", description="Narrative of the whole analysis")
