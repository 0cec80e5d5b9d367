from __future__ import annotations

import uuid
from typing import Any, List

from ..data.models import ConversationSession, TranscriptMessage
from ..errors import MalformedCollaboratorOutput
from ..logging import get_logger
from .http import HttpService, post_json, require_key

logger = get_logger(__name__)

COLLABORATOR = "conversation"

SIMULATED_USER_PROMPT = (
    "You are the owner of a small business reviewing a purchase recommendation. "
    "Ask about anything unclear, then approve or decline the order."
)


def parse_transcript(turns: Any) -> List[TranscriptMessage]:
    if not isinstance(turns, list):
        raise MalformedCollaboratorOutput(COLLABORATOR, "'simulated_conversation' is not a list")
    messages = []
    for turn in turns:
        if not isinstance(turn, dict) or turn.get("role") not in ("agent", "user"):
            raise MalformedCollaboratorOutput(COLLABORATOR, f"unexpected transcript turn: {turn!r}")
        messages.append(TranscriptMessage(role=turn["role"], content=turn.get("message") or ""))
    return messages


class ElevenLabsConversationService(HttpService):
    """Talks a recommendation through with an ElevenLabs conversational agent.

    Uses the agent's simulate-conversation endpoint: the recommendation is the
    agent's opening message and a simulated user stands in for the owner.
    The returned transcript is kept verbatim.
    """

    def start_session(self, recommendation_text: str) -> ConversationSession:
        key = require_key(COLLABORATOR, self.config.elevenlabs_api_key, "elevenlabs_api_key")
        agent_id = require_key(COLLABORATOR, self.config.elevenlabs_agent_id, "elevenlabs_agent_id")
        payload = {
            "simulation_specification": {
                "simulated_user_config": {"prompt": {"prompt": SIMULATED_USER_PROMPT}},
                "conversation_config_override": {"agent": {"first_message": recommendation_text}},
            },
        }
        logger.info(f"Starting conversation with agent {agent_id}")
        data = post_json(
            self.client,
            COLLABORATOR,
            f"{self.config.elevenlabs_base_url.rstrip('/')}/convai/agents/{agent_id}/simulate-conversation",
            payload,
            headers={"xi-api-key": key},
            timeout=self.config.conversation_timeout,
        )
        if not isinstance(data, dict):
            raise MalformedCollaboratorOutput(COLLABORATOR, "response is not an object")

        transcript = parse_transcript(data.get("simulated_conversation"))
        session_id = data.get("conversation_id") or f"sim_{uuid.uuid4().hex}"
        logger.info(f"Conversation {session_id} finished with {len(transcript)} turns")
        return ConversationSession(session_id=session_id, transcript=transcript)
