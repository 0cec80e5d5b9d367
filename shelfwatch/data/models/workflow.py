from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .analysis import StockAlert, StockAnalysis
from .observations import ParsedItem
from .recommendations import OrderRecommendation


class SupplierWorkflowResult(BaseModel):
    """Outcome of the supplier search -> draft order -> conversation pipeline."""
    order_id: str = Field(description="Draft order created")
    session_id: str = Field(description="Conversational session used")
    conversation_id: str = Field(description="Stored transcript")
    recommendation: OrderRecommendation = Field(description="Order the reasoning step proposed")


class InventoryWorkflowResult(BaseModel):
    """Outcome of processing one shelf photo."""
    photo_id: Optional[str] = Field(default=None, description="Stored photo; None when nothing was detected")
    items: List[ParsedItem] = Field(default_factory=list, description="Items parsed from the vision output")
    alerts: List[StockAlert] = Field(default_factory=list, description="Sharp declines raised to the user")
    analysis: Optional[StockAnalysis] = Field(default=None, description="Trend analysis after the update")
    reorder: Optional[SupplierWorkflowResult] = Field(default=None, description="Set when a reorder was drafted")
