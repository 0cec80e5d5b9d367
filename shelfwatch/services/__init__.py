from .interface import (
    VisionService,
    SupplierSearchService,
    ReasoningService,
    ConversationService,
    Notifier,
)
from .cache import SupplierSearchCache
from .notifier import LogNotifier
from .vision import FalVisionService
from .supplier_search import ValyuSupplierSearch
from .reasoning import OpenAIReasoningService
from .conversation import ElevenLabsConversationService
from .payloads import (
    extract_supplier_info,
    supplier_options,
    generate_recommendation_summary,
)

__all__ = [
    # Protocols
    "VisionService",
    "SupplierSearchService",
    "ReasoningService",
    "ConversationService",
    "Notifier",
    # Implementations
    "SupplierSearchCache",
    "LogNotifier",
    "FalVisionService",
    "ValyuSupplierSearch",
    "OpenAIReasoningService",
    "ElevenLabsConversationService",
    # Payload helpers
    "extract_supplier_info",
    "supplier_options",
    "generate_recommendation_summary",
]
