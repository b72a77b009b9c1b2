from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StyleEnum(str, Enum):
    stable_diffusion = "stable-diffusion"
    flux = "flux"
    dreamshaper = "dreamshaper"
    realistic = "realistic"


Number = Union[int, float]


class ForecastPoint(BaseModel):
    """One 3-hour forecast interval, as sent to the browser and back."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: str = Field(alias="datetime")
    temperature: int
    humidity: Number
    pressure: Number
    description: str
    main: str
    icon: str
    wind_speed: Number = Field(alias="windSpeed")
    wind_direction: Optional[Number] = Field(default=None, alias="windDirection")
    clouds: Number


class Coordinates(BaseModel):
    lat: float
    lon: float


class WeatherReport(BaseModel):
    location: str
    coordinates: Coordinates
    forecast: List[ForecastPoint]


class WeatherRequest(BaseModel):
    location: Optional[str] = None


class ArtRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weather_data: Optional[Dict[str, Any]] = Field(default=None, alias="weatherData")
    artistic_style: Optional[str] = Field(default=None, alias="artisticStyle")


class DebugInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    prompt_length: int = Field(alias="promptLength")
    style: StyleEnum
    model: str
    timestamp: str


class GenerationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    art_prompt: str = Field(alias="artPrompt")
    image_url: str = Field(alias="imageUrl")
    weather_data: WeatherReport = Field(alias="weatherData")
    debug: DebugInfo


class ErrorResponse(BaseModel):
    error: str


class GenerationErrorResponse(BaseModel):
    error: str
    stack: str
    timestamp: str
