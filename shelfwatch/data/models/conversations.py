from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class TranscriptMessage(BaseModel):
    """One turn of a voice-agent conversation."""
    role: Literal["agent", "user", "system"] = Field(description="Who spoke")
    content: str = Field(description="What was said")
    timestamp: Optional[datetime] = Field(default=None, description="When it was said")
    audio_url: Optional[str] = Field(default=None, description="Recording of this turn, if available")


class ConversationSession(BaseModel):
    """A conversational-agent session and its transcript."""
    session_id: str = Field(description="Session identifier from the conversational collaborator")
    transcript: List[TranscriptMessage] = Field(default_factory=list, description="Ordered turns")


class AgentConversation(BaseModel):
    """A stored conversation linked to the order it discussed."""
    conversation_id: str = Field(description="Unique conversation identifier")
    user_id: str = Field(description="Owning user")
    order_id: Optional[str] = Field(default=None, description="Order discussed")
    photo_id: Optional[str] = Field(default=None, description="Photo that started the workflow")
    session_id: str = Field(description="Conversational session identifier")
    transcript: List[TranscriptMessage] = Field(default_factory=list, description="Ordered turns, verbatim")
    agent_reasoning: Optional[str] = Field(default=None, description="Reasoning shown to the agent")
    recommendations: Dict[str, Any] = Field(default_factory=dict, description="Recommendation payload")
    status: Literal["active", "completed", "archived"] = Field(default="active")
    created_at: datetime = Field(description="Creation timestamp")
