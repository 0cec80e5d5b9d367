from .observations import Observation, ParsedItem, as_utc

from .analysis import (
    StockTrend,
    StockAnalysis,
    StockOutPrediction,
    ReorderLevels,
    PredictiveDataPoint,
    PredictiveCurve,
    StockAlert,
)
from .inventory import InventoryItem, InventoryPhoto, InventoryCount
from .suppliers import SupplierProduct, ExistingSupplier, SupplierCandidate
from .recommendations import (
    InventoryContext,
    SupplierOption,
    SupplierToAdd,
    PriceUpdate,
    SupplierRecommendations,
    OrderRecommendation,
    ProcurementAnalysis,
)
from .orders import OrderLine, DraftOrder, OrderRecord
from .conversations import TranscriptMessage, ConversationSession, AgentConversation
from .workflow import SupplierWorkflowResult, InventoryWorkflowResult

__all__ = [
    # Observations
    "Observation",
    "ParsedItem",
    "as_utc",
    # Derived analysis
    "StockTrend",
    "StockAnalysis",
    "StockOutPrediction",
    "ReorderLevels",
    "PredictiveDataPoint",
    "PredictiveCurve",
    "StockAlert",
    # Stored records
    "InventoryItem",
    "InventoryPhoto",
    "InventoryCount",
    "SupplierProduct",
    "ExistingSupplier",
    "OrderLine",
    "DraftOrder",
    "OrderRecord",
    "AgentConversation",
    # Collaborator payloads
    "SupplierCandidate",
    "InventoryContext",
    "SupplierOption",
    "SupplierToAdd",
    "PriceUpdate",
    "SupplierRecommendations",
    "OrderRecommendation",
    "ProcurementAnalysis",
    "TranscriptMessage",
    "ConversationSession",
    # Workflow results
    "SupplierWorkflowResult",
    "InventoryWorkflowResult",
]
