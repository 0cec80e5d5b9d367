from __future__ import annotations

import base64
import mimetypes

from ..errors import MalformedCollaboratorOutput
from ..logging import get_logger
from .http import HttpService, post_json, require_key

logger = get_logger(__name__)

COLLABORATOR = "vision"


def image_data_uri(image: bytes, filename: str) -> str:
    mime, _ = mimetypes.guess_type(filename)
    encoded = base64.b64encode(image).decode("ascii")
    return f"data:{mime or 'image/jpeg'};base64,{encoded}"


class FalVisionService(HttpService):
    """Describes a shelf photo with a fal.ai visual-query model.

    The image is sent inline as a data URI to the synchronous run endpoint
    (``{fal_base_url}/{fal_model}``); the model's text answer is returned
    untouched for the text parser.
    """

    def describe_image(self, image: bytes, filename: str = "inventory.jpg") -> str:
        key = require_key(COLLABORATOR, self.config.fal_key, "fal_key")
        url = f"{self.config.fal_base_url.rstrip('/')}/{self.config.fal_model}"
        payload = {
            "image_url": image_data_uri(image, filename),
            "prompt": self.config.fal_prompt,
        }
        logger.info(f"Describing {filename} ({len(image)} bytes) with {self.config.fal_model}")
        data = post_json(
            self.client,
            COLLABORATOR,
            url,
            payload,
            headers={"Authorization": f"Key {key}"},
            timeout=self.config.vision_timeout,
        )

        output = data.get("output") if isinstance(data, dict) else None
        if not isinstance(output, str):
            raise MalformedCollaboratorOutput(COLLABORATOR, "response has no text 'output'")
        logger.debug(f"Vision output: {output!r}")
        return output
