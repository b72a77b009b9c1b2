import logging
import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse

from core.exceptions import ArtForecastError
from core.logger import configure_logging
from routers.art import GENERATE_ART_PATH, generation_error_response
from routers.art import router as art_router
from routers.weather import router as weather_router

configure_logging(os.getenv("LOG_LEVEL"))
logger = logging.getLogger(__name__)

INDEX_HTML = Path(__file__).resolve().parent / "static" / "index.html"

app = FastAPI(
    title="Artistic Weather Forecast",
    version="1.0.0",
    description="Turns a short-term forecast into a generated image",
)

app.include_router(weather_router)
app.include_router(art_router)


@app.exception_handler(ArtForecastError)
async def art_forecast_error_handler(request: Request, exc: ArtForecastError):
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    if request.url.path == GENERATE_ART_PATH:
        return generation_error_response(exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Malformed request body"})


@app.get("/", include_in_schema=False)
async def index():
    return FileResponse(INDEX_HTML, media_type="text/html")


@app.get("/health")
async def health():
    """Simple liveness check."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
