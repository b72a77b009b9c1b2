from __future__ import annotations

from fastapi import APIRouter, Depends

from core.exceptions import ValidationError
from core.schemas import ErrorResponse, WeatherReport, WeatherRequest
from core.weather import LocationResolver
from routers.dependencies import get_resolver

router = APIRouter(prefix="/api", tags=["Weather"])


@router.post(
    "/weather",
    response_model=WeatherReport,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def weather(body: WeatherRequest, resolver: LocationResolver = Depends(get_resolver)):
    location = (body.location or "").strip()
    if not location:
        raise ValidationError("Location is required")
    return await resolver.resolve(location)
