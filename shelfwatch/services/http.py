from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import AppConfig, get_config
from ..errors import CollaboratorError, MalformedCollaboratorOutput
from ..logging import get_logger

logger = get_logger(__name__)


class HttpService:
    """Base for the httpx-backed collaborator clients.

    A client created here is closed by close() or on leaving a with block;
    an injected client belongs to the caller and is left open.
    """

    def __init__(self, config: Optional[AppConfig] = None, client: Optional[httpx.Client] = None):
        self.config = config or get_config()
        self._owns_client = client is None
        self.client = client or httpx.Client()

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def post_json(
    client: httpx.Client,
    collaborator: str,
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Any:
    """POST a JSON body and return the decoded JSON response.

    Raises:
        CollaboratorError: on transport errors, timeouts and non-2xx statuses.
        MalformedCollaboratorOutput: when the body is not valid JSON.
    """
    logger.debug(f"[{collaborator}] POST {url}")
    try:
        response = client.post(url, json=payload, headers=headers, timeout=timeout)
        response.raise_for_status()
    except httpx.TimeoutException as e:
        logger.error(f"[{collaborator}] timed out after {timeout}s")
        raise CollaboratorError(collaborator, f"timed out after {timeout}s") from e
    except httpx.HTTPStatusError as e:
        logger.error(f"[{collaborator}] HTTP {e.response.status_code}: {e.response.text[:200]}")
        raise CollaboratorError(collaborator, f"HTTP {e.response.status_code} {e.response.reason_phrase}") from e
    except httpx.HTTPError as e:
        logger.error(f"[{collaborator}] request failed: {e}")
        raise CollaboratorError(collaborator, str(e)) from e

    try:
        return response.json()
    except ValueError as e:
        raise MalformedCollaboratorOutput(collaborator, "response body is not JSON") from e


def require_key(collaborator: str, value: Optional[str], setting: str) -> str:
    if not value:
        raise CollaboratorError(collaborator, f"missing configuration value '{setting}'")
    return value
