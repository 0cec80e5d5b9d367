from __future__ import annotations

from typing import List, Literal, Optional, Protocol

from ..data.models import (
    ConversationSession,
    ExistingSupplier,
    InventoryContext,
    ProcurementAnalysis,
    SupplierCandidate,
    SupplierOption,
)


# ---- External collaborator protocols ----
# Implementations raise CollaboratorError on failure or timeout and
# MalformedCollaboratorOutput when a response cannot be validated.

class VisionService(Protocol):
    """Image in, free text out: roughly one item mention per line."""

    def describe_image(self, image: bytes, filename: str = "inventory.jpg") -> str:
        ...


class SupplierSearchService(Protocol):
    """Finds candidate suppliers for an item on the open web."""

    def search(
        self,
        item_name: str,
        max_results: int = 5,
        location: Optional[str] = None,
    ) -> List[SupplierCandidate]:
        ...


class ReasoningService(Protocol):
    """LLM that weighs our suppliers against new ones and proposes an order."""

    def analyze(
        self,
        context: InventoryContext,
        existing_suppliers: List[ExistingSupplier],
        new_suppliers: List[SupplierOption],
    ) -> ProcurementAnalysis:
        ...


class ConversationService(Protocol):
    """Voice agent that talks the recommendation through and returns the transcript."""

    def start_session(self, recommendation_text: str) -> ConversationSession:
        ...


class Notifier(Protocol):
    """User-facing notifications (toasts in the web app)."""

    def notify(
        self,
        title: str,
        description: str,
        variant: Literal["default", "destructive"] = "default",
    ) -> None:
        ...
