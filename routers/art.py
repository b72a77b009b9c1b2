from __future__ import annotations

import logging
import traceback
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import ValidationError
from core.prompt import PromptSynthesizer
from core.renderer import ImageRenderer
from core.schemas import ArtRequest, DebugInfo, GenerationErrorResponse, GenerationResult, WeatherReport
from routers.dependencies import get_renderer, get_synthesizer

GENERATE_ART_PATH = "/api/generate-art"

router = APIRouter(tags=["Art"])
logger = logging.getLogger(__name__)


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generation_error_response(exc: BaseException) -> JSONResponse:
    """Every art-route failure answers 500 with the message, traceback and time."""
    error = GenerationErrorResponse(
        error=str(exc),
        stack="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        timestamp=_utcnow_iso(),
    )
    return JSONResponse(status_code=500, content=error.model_dump())


async def _read_body(request: Request) -> ArtRequest:
    try:
        payload = await request.json()
    except ValueError as e:
        raise ValidationError("Malformed request body") from e
    try:
        return ArtRequest.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Invalid weather data provided") from e


def _parse_report(body: ArtRequest) -> WeatherReport:
    if not body.weather_data or not body.weather_data.get("forecast"):
        raise ValidationError("Invalid weather data provided")
    try:
        return WeatherReport.model_validate(body.weather_data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid weather data provided: {e.error_count()} field error(s)") from e


@router.post(
    GENERATE_ART_PATH,
    response_model=GenerationResult,
    responses={500: {"model": GenerationErrorResponse}},
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": ArtRequest.model_json_schema()}}}},
)
async def generate_art(
    request: Request,
    synthesizer: PromptSynthesizer = Depends(get_synthesizer),
    renderer: ImageRenderer = Depends(get_renderer),
):
    try:
        body = await _read_body(request)
        report = _parse_report(body)
        logger.info("Starting art generation for %s, style %r", report.location, body.artistic_style)

        art_prompt = await synthesizer.synthesize(report)
        image = await renderer.render(art_prompt, body.artistic_style)
    except Exception as e:
        logger.exception("Art generation failed")
        return generation_error_response(e)

    return GenerationResult(
        art_prompt=art_prompt,
        image_url=image.data_url,
        weather_data=report,
        debug=DebugInfo(
            prompt_length=len(art_prompt),
            style=image.style,
            model=image.model,
            timestamp=_utcnow_iso(),
        ),
    )
