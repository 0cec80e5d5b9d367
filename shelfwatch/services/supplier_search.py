from __future__ import annotations

from typing import List, Optional

from ..data.models import SupplierCandidate
from ..errors import MalformedCollaboratorOutput
from ..logging import get_logger
from .http import HttpService, post_json, require_key
from .payloads import extract_supplier_info, supplier_search_query

logger = get_logger(__name__)

COLLABORATOR = "supplier_search"


class ValyuSupplierSearch(HttpService):
    """Web supplier search backed by the Valyu search API."""

    def search(
        self,
        item_name: str,
        max_results: int = 5,
        location: Optional[str] = None,
    ) -> List[SupplierCandidate]:
        key = require_key(COLLABORATOR, self.config.valyu_api_key, "valyu_api_key")
        query = supplier_search_query(item_name, location)
        logger.info(f"Searching suppliers: {query!r}")

        data = post_json(
            self.client,
            COLLABORATOR,
            f"{self.config.valyu_base_url.rstrip('/')}/search",
            {"query": query, "search_type": "web", "max_num_results": max_results},
            headers={"x-api-key": key},
            timeout=self.config.search_timeout,
        )

        results = data.get("results", []) if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise MalformedCollaboratorOutput(COLLABORATOR, "'results' is not a list")

        candidates = [extract_supplier_info(r) for r in results if isinstance(r, dict)]
        logger.info(f"Found {len(candidates)} supplier candidates for {item_name}")
        return candidates
