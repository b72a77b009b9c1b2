"""Small async HTTP helper built on httpx."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from core.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def error_message(response: httpx.Response) -> str:
    """Pull the provider's own error text out of a failed response."""
    try:
        payload = response.json()
    except ValueError:
        return "Unknown error"
    if not isinstance(payload, dict):
        return "Unknown error"

    error = payload.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if payload.get("message"):
        return str(payload["message"])
    errors = payload.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("message"):
        return str(errors[0]["message"])
    return "Unknown error"


class aio_requests:
    """Wraps one httpx.AsyncClient; use as ``async with aio_requests() as request``."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "aio_requests":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def request(self, method: str, url: str, *, provider: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise UpstreamError on transport failure or error status."""
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            # the exception text may embed the URL, and with it a query-string key
            logger.error("%s request failed: %s", provider, e.__class__.__name__)
            raise UpstreamError(f"{provider} request failed: {e.__class__.__name__}", provider=provider) from e

        if response.is_error:
            message = error_message(response)
            logger.warning("%s answered %s: %s", provider, response.status_code, message)
            raise UpstreamError(message, provider=provider, status_code=response.status_code)
        return response

    async def request_json(
        self,
        url: str,
        *,
        provider: str,
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> Any:
        response = await self.request(method, url, provider=provider, params=params, headers=headers, json=json)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"{provider} returned a malformed JSON body", provider=provider) from e
