from __future__ import annotations

import json
from typing import List, Optional

from pydantic import ValidationError

from ..data.models import ExistingSupplier, InventoryContext, ProcurementAnalysis, SupplierOption
from ..errors import MalformedCollaboratorOutput
from ..logging import get_logger
from .http import HttpService, post_json, require_key
from .payloads import REASONING_SYSTEM_PROMPT, build_procurement_prompt

logger = get_logger(__name__)

COLLABORATOR = "reasoning"


def parse_analysis(content: Optional[str]) -> ProcurementAnalysis:
    """Validate the model's JSON answer into a ProcurementAnalysis."""
    if not content:
        raise MalformedCollaboratorOutput(COLLABORATOR, "empty completion")
    try:
        return ProcurementAnalysis.model_validate(json.loads(content))
    except json.JSONDecodeError as e:
        raise MalformedCollaboratorOutput(COLLABORATOR, f"completion is not JSON: {e.msg}") from e
    except ValidationError as e:
        raise MalformedCollaboratorOutput(
            COLLABORATOR, f"completion failed validation ({e.error_count()} errors)"
        ) from e


class OpenAIReasoningService(HttpService):
    """Procurement analysis through the OpenAI chat completions API in JSON mode."""

    def analyze(
        self,
        context: InventoryContext,
        existing_suppliers: List[ExistingSupplier],
        new_suppliers: List[SupplierOption],
    ) -> ProcurementAnalysis:
        key = require_key(COLLABORATOR, self.config.openai_api_key, "openai_api_key")
        payload = {
            "model": self.config.openai_model,
            "messages": [
                {"role": "system", "content": REASONING_SYSTEM_PROMPT},
                {"role": "user", "content": build_procurement_prompt(context, existing_suppliers, new_suppliers)},
            ],
            "temperature": self.config.openai_temperature,
            "max_tokens": 2000,
            "response_format": {"type": "json_object"},
        }
        logger.info(
            f"Analyzing {context.item_name} against {len(existing_suppliers)} existing "
            f"and {len(new_suppliers)} new suppliers"
        )
        data = post_json(
            self.client,
            COLLABORATOR,
            f"{self.config.openai_base_url.rstrip('/')}/chat/completions",
            payload,
            headers={"Authorization": f"Bearer {key}"},
            timeout=self.config.reasoning_timeout,
        )

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedCollaboratorOutput(COLLABORATOR, "response has no message content") from e

        analysis = parse_analysis(content)
        logger.debug(f"Reasoning recommends {analysis.order_recommendation.recommended_supplier}")
        return analysis
