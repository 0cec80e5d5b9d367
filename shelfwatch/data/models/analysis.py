from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

Trend = Literal["increasing", "decreasing", "stable"]
RiskLevel = Literal["low", "medium", "high", "critical"]


class StockTrend(BaseModel):
    """Decline and risk for one item over an observation window."""
    item_name: str = Field(description="Inventory item name")
    current_quantity: int = Field(description="Newest count in the window")
    previous_quantity: int = Field(description="Oldest count in the window")
    decline_percentage: int = Field(description="Rounded decline from oldest to newest count")
    days_tracked: int = Field(description="Length of the observation window in days")
    trend: Trend = Field(description="Direction of the raw percent change")
    risk_level: RiskLevel = Field(description="Risk derived from the unrounded decline")


class StockAnalysis(BaseModel):
    """Bucketed trends for every item with enough data in the window."""
    low_stock_items: List[StockTrend] = Field(default_factory=list, description="High-risk, non-critical items")
    healthy_stock_items: List[StockTrend] = Field(default_factory=list, description="Low-risk or increasing items")
    critical_items: List[StockTrend] = Field(default_factory=list, description="Items declining 50% or more")
    analyzed_at: datetime = Field(description="Reference time of the analysis")


class StockOutPrediction(BaseModel):
    """Projected depletion for a single item."""
    item_name: str = Field(description="Inventory item name")
    current_quantity: int = Field(description="Latest count in the window")
    estimated_daily_usage: float = Field(description="Units consumed per day, one decimal")
    days_until_stock_out: int = Field(description="Whole days until the item runs out")
    estimated_stock_out_date: datetime = Field(description="Projected stock-out date")


class ReorderLevels(BaseModel):
    """Stock thresholds derived from usage rate and supplier lead time."""
    maximum_stock: int = Field(ge=0, description="Stock level right after a restock")
    reorder_level: int = Field(ge=0, description="Quantity that triggers a purchase order")
    minimum_stock: int = Field(ge=0, description="Floor the simulation never goes below")
    buffer_stock: int = Field(ge=0, description="Safety stock held against lead-time demand")
    lead_time_days: int = Field(ge=0, description="Supplier lead time in days")

    @model_validator(mode="after")
    def _check_ordering(self) -> "ReorderLevels":
        if not self.minimum_stock <= self.reorder_level <= self.maximum_stock:
            raise ValueError("expected minimum_stock <= reorder_level <= maximum_stock")
        return self

    @classmethod
    def defaults(cls, lead_time_days: int = 3) -> "ReorderLevels":
        """Fallback levels used when there is no usable usage estimate."""
        return cls(
            maximum_stock=600,
            reorder_level=300,
            minimum_stock=100,
            buffer_stock=50,
            lead_time_days=lead_time_days,
        )


class PredictiveDataPoint(BaseModel):
    """A point on the stock chart, historical or simulated."""
    date: str = Field(description="Short display date, e.g. 'Oct 5'")
    quantity: int = Field(description="Stock quantity on that date")
    is_predicted: bool = Field(description="False for recorded counts")
    is_reorder_point: bool = Field(default=False, description="True for the simulated restock")
    days_until_delivery: Optional[int] = Field(default=None, description="Countdown while an order is in transit")


class PredictiveCurve(BaseModel):
    """Historical and simulated stock levels plus the thresholds used."""
    data: List[PredictiveDataPoint] = Field(default_factory=list, description="Chronological chart points")
    reorder_levels: ReorderLevels = Field(description="Thresholds driving the simulation")


class StockAlert(BaseModel):
    """A freshly counted item that fell sharply against its recent counts."""
    item_name: str = Field(description="Inventory item name")
    current_quantity: int = Field(description="Quantity just counted")
    average_previous: float = Field(description="Mean of the recent counts it was compared against")
    decline_percentage: int = Field(description="Rounded decline against the recent mean")
