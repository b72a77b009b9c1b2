from __future__ import annotations

import logging

from core.async_requests import aio_requests
from core.exceptions import UpstreamError, ValidationError
from core.schemas import ForecastPoint, WeatherReport

logger = logging.getLogger(__name__)

PROVIDER = "Gemini"

PROMPT_TEMPLATE = """Transform this weather forecast into an artistic concept for image generation. Focus on the WEATHER PHENOMENA themselves, not decorative elements or settings.

Weather Data for {location}:
{summary}

Create a detailed artistic prompt that captures the essence and patterns of these weather conditions. Think about:
- Visual metaphors for temperature variations
- Artistic representation of weather phenomena (rain, clouds, wind, etc.)
- Color palettes that reflect the atmospheric conditions
- Abstract or impressionistic interpretations of meteorological data
- Dynamic elements that show weather changes over time

Respond with a concise but vivid artistic prompt (under 200 words) that focuses purely on weather phenomena visualization, not landscapes or environments."""


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def summarize_point(point: ForecastPoint) -> str:
    return (
        f"{point.timestamp}: {point.description}, {point.temperature}°C, "
        f"humidity {_format_number(point.humidity)}%, wind {_format_number(point.wind_speed)}m/s"
    )


def build_prompt(report: WeatherReport) -> str:
    if not report.forecast:
        raise ValidationError("Invalid weather data provided")
    summary = "\n".join(summarize_point(p) for p in report.forecast)
    return PROMPT_TEMPLATE.format(location=report.location, summary=summary)


class PromptSynthesizer:
    """Asks the text model to turn a forecast into an image prompt."""

    def __init__(
        self,
        request: aio_requests,
        *,
        api_key: str,
        endpoint: str,
        model: str,
        max_output_tokens: int = 300,
        temperature: float = 0.7,
    ):
        self.request = request
        self._api_key = api_key
        self.url = f"{endpoint.rstrip('/')}/{model}:generateContent"
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature

    async def synthesize(self, report: WeatherReport) -> str:
        prompt = build_prompt(report)
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": self.max_output_tokens,
                "temperature": self.temperature,
            },
        }
        headers = {"x-goog-api-key": self._api_key}
        data = await self.request.request_json(self.url, provider=PROVIDER, method="POST", json=body, headers=headers)

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError("Gemini response contained no candidate text", provider=PROVIDER) from e

        logger.info("Generated art prompt for %s, length %d", report.location, len(text))
        return text
