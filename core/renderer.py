from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

from core.async_requests import aio_requests
from core.exceptions import GenerationError
from core.image_response import normalize
from core.schemas import StyleEnum
from core.styles import STYLE_PROFILES, resolve_style

logger = logging.getLogger(__name__)

PROVIDER = "Workers AI"


class WorkersAIClient:
    """Calls models from the Workers AI registry over its REST API."""

    def __init__(self, request: aio_requests, *, account_id: str, api_token: str, base_url: str):
        self.request = request
        self._api_token = api_token
        self.run_url = f"{base_url.rstrip('/')}/accounts/{account_id}/ai/run"

    async def run(self, model: str, params: Dict[str, Any]) -> Any:
        """Return raw bytes for image bodies, decoded JSON otherwise."""
        headers = {"Authorization": f"Bearer {self._api_token}"}
        response = await self.request.request(
            "POST", f"{self.run_url}/{model}", provider=PROVIDER, json=params, headers=headers
        )
        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        if content_type.startswith("image/") or content_type == "application/octet-stream":
            return response.content
        if content_type == "application/json" or content_type.endswith("+json"):
            try:
                return response.json()
            except ValueError as e:
                raise GenerationError(f"{PROVIDER} returned a malformed JSON body") from e
        raise GenerationError(f"Unexpected {PROVIDER} response content type: {content_type or 'none'}")


@dataclass(frozen=True)
class RenderedImage:
    data_url: str
    style: StyleEnum
    model: str


class ImageRenderer:
    def __init__(self, client: WorkersAIClient):
        self.client = client

    async def render(self, prompt: str, style: str | None) -> RenderedImage:
        resolved = resolve_style(style)
        profile = STYLE_PROFILES[resolved]
        logger.info("Rendering with %s (style %s), prompt length %d", profile.model, resolved.value, len(prompt))
        try:
            response = await self.client.run(profile.model, profile.params(prompt))
            data_url = normalize(response)
        except GenerationError as e:
            raise GenerationError(f"Image generation failed: {e.message}") from e
        except Exception as e:
            logger.exception("Image generation failed")
            raise GenerationError(f"Image generation failed: {e}") from e

        logger.info("Rendered image data URL, length %d", len(data_url))
        return RenderedImage(data_url=data_url, style=resolved, model=profile.model)
