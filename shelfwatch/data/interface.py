from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from .models import (
    AgentConversation,
    ConversationSession,
    DraftOrder,
    ExistingSupplier,
    InventoryItem,
    InventoryPhoto,
    Observation,
    OrderRecord,
)


# ---- Persistence protocol ----

class InventoryStore(Protocol):
    """
    Backend-agnostic contract for user-scoped inventory persistence.

    - Items are unique by (user_id, item_name); upserts never duplicate them.
    - Counts are append-only. Nothing here mutates or deletes a count.
    - Queries return observations oldest first.
    """

    # Items and counts

    def upsert_item(self, user_id: str, item_name: str) -> InventoryItem:
        """Return the item, creating it on first sight."""
        ...

    def list_items(self, user_id: str) -> List[InventoryItem]:
        """List all items tracked for a user."""
        ...

    def save_photo(
        self,
        user_id: str,
        storage_path: str,
        description: Optional[str] = None,
        analysis_data: Optional[Dict[str, Any]] = None,
    ) -> InventoryPhoto:
        """Record a photo (or manual-log placeholder) counts can point at."""
        ...

    def append_count(
        self,
        item_id: str,
        photo_id: str,
        quantity: int,
        confidence_score: float = 1.0,
        observed_at: Optional[datetime] = None,
    ) -> Observation:
        """Append one count for an item."""
        ...

    def get_observations(
        self,
        user_id: str,
        item_name: str,
        since: Optional[datetime] = None,
    ) -> List[Observation]:
        """Counts for one item, oldest first; raises ItemNotFoundError for unknown items."""
        ...

    def get_observations_by_item(
        self,
        user_id: str,
        since: Optional[datetime] = None,
    ) -> Dict[str, List[Observation]]:
        """Counts for every item a user tracks, keyed by item name."""
        ...

    # Suppliers, orders and conversations

    def list_suppliers(self, product_name: Optional[str] = None) -> List[ExistingSupplier]:
        """Known suppliers, optionally only those carrying a product (case-insensitive substring)."""
        ...

    def create_draft_order(self, order: DraftOrder) -> OrderRecord:
        """Persist a draft order and return it with its id."""
        ...

    def save_conversation(
        self,
        user_id: str,
        session: ConversationSession,
        order_id: Optional[str] = None,
        photo_id: Optional[str] = None,
        agent_reasoning: Optional[str] = None,
        recommendations: Optional[Dict[str, Any]] = None,
    ) -> AgentConversation:
        """Persist a conversation transcript verbatim."""
        ...
