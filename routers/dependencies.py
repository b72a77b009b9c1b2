"""Per-request wiring of the pipeline stages."""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends

from config import (
    GeminiSettings,
    OpenWeatherSettings,
    Settings,
    WorkersAISettings,
    get_gemini_settings,
    get_openweather_settings,
    get_settings,
    get_workers_ai_settings,
)
from core.async_requests import aio_requests
from core.prompt import PromptSynthesizer
from core.renderer import ImageRenderer, WorkersAIClient
from core.weather import LocationResolver


async def get_request(settings: Settings = Depends(get_settings)) -> AsyncIterator[aio_requests]:
    async with aio_requests(timeout=settings.http_timeout) as request:
        yield request


def get_resolver(
    request: aio_requests = Depends(get_request),
    ow: OpenWeatherSettings = Depends(get_openweather_settings),
) -> LocationResolver:
    return LocationResolver(
        request,
        api_key=ow.api_key.get_secret_value(),
        geocoding_url=ow.geocoding_url,
        forecast_url=ow.forecast_url,
        intervals=ow.forecast_intervals,
    )


def get_synthesizer(
    request: aio_requests = Depends(get_request),
    gemini: GeminiSettings = Depends(get_gemini_settings),
) -> PromptSynthesizer:
    return PromptSynthesizer(
        request,
        api_key=gemini.api_key.get_secret_value(),
        endpoint=gemini.endpoint,
        model=gemini.model,
        max_output_tokens=gemini.max_output_tokens,
        temperature=gemini.temperature,
    )


def get_renderer(
    request: aio_requests = Depends(get_request),
    cf: WorkersAISettings = Depends(get_workers_ai_settings),
) -> ImageRenderer:
    client = WorkersAIClient(
        request,
        account_id=cf.account_id,
        api_token=cf.api_token.get_secret_value(),
        base_url=cf.base_url,
    )
    return ImageRenderer(client)
