from __future__ import annotations

import logging
import math
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from core.async_requests import aio_requests
from core.exceptions import NotFoundError, UpstreamError
from core.schemas import Coordinates, ForecastPoint, WeatherReport

logger = logging.getLogger(__name__)

PROVIDER = "OpenWeather"
DEFAULT_INTERVALS = 8


def _round_half_up(value: float) -> int:
    return int(math.floor(float(value) + 0.5))


def parse_forecast_item(item: Dict[str, Any]) -> ForecastPoint:
    """Map one entry of the provider's ``list`` array to a ForecastPoint."""
    main = item.get("main") or {}
    weather = (item.get("weather") or [{}])[0]
    wind = item.get("wind") or {}
    clouds = item.get("clouds") or {}
    return ForecastPoint(
        timestamp=item["dt_txt"],
        temperature=_round_half_up(main["temp"]),
        humidity=main["humidity"],
        pressure=main["pressure"],
        description=weather.get("description", ""),
        main=weather.get("main", ""),
        icon=weather.get("icon", ""),
        wind_speed=wind.get("speed", 0.0),
        wind_direction=wind.get("deg"),
        clouds=clouds.get("all", 0),
    )


class LocationResolver:
    """Geocodes a place name and fetches its short-term forecast."""

    def __init__(
        self,
        request: aio_requests,
        *,
        api_key: str,
        geocoding_url: str,
        forecast_url: str,
        intervals: int = DEFAULT_INTERVALS,
    ):
        self.request = request
        self._api_key = api_key
        self.geocoding_url = geocoding_url
        self.forecast_url = forecast_url
        self.intervals = intervals

    async def _geocode(self, location: str) -> Dict[str, Any]:
        params = {"q": location, "limit": 1, "appid": self._api_key}
        payload = await self.request.request_json(self.geocoding_url, provider=PROVIDER, params=params)
        if isinstance(payload, list) and not payload:
            raise NotFoundError("Location not found")
        if not isinstance(payload, list) or not isinstance(payload[0], dict):
            raise UpstreamError("Geocoding response is not a list of matches", provider=PROVIDER)
        return payload[0]

    async def _forecast(self, lat: float, lon: float) -> list[Dict[str, Any]]:
        params = {"lat": lat, "lon": lon, "appid": self._api_key, "units": "metric"}
        payload = await self.request.request_json(self.forecast_url, provider=PROVIDER, params=params)
        items = payload.get("list") if isinstance(payload, dict) else None
        if items is None:
            raise UpstreamError("Forecast response has no interval list", provider=PROVIDER)
        return items

    async def resolve(self, location: str) -> WeatherReport:
        match = await self._geocode(location)
        try:
            lat, lon = float(match["lat"]), float(match["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Geocoding match has no usable coordinates: {e}", provider=PROVIDER) from e
        name = f"{match.get('name', location)}, {match.get('country', '')}"
        logger.info("Resolved %r to %s (%.4f, %.4f)", location, name, lat, lon)

        items = await self._forecast(lat, lon)
        try:
            forecast = [parse_forecast_item(item) for item in items[: self.intervals]]
        except (KeyError, TypeError, IndexError, PydanticValidationError) as e:
            raise UpstreamError(f"Unexpected forecast entry: {e}", provider=PROVIDER) from e

        logger.info("Forecast for %s: %d of %d intervals kept", name, len(forecast), len(items))
        return WeatherReport(location=name, coordinates=Coordinates(lat=lat, lon=lon), forecast=forecast)
