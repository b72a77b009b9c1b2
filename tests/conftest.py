from __future__ import annotations

import json
from typing import Any, Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

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
from routers.dependencies import get_request

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-body"


def make_forecast_item(index: int, temp: float = 12.4) -> dict:
    return {
        "dt": 1700000000 + index * 10800,
        "dt_txt": f"2024-05-{1 + index * 3 // 24:02d} {(index * 3) % 24:02d}:00:00",
        "main": {"temp": temp, "humidity": 70, "pressure": 1012},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "clouds": {"all": 90},
        "wind": {"speed": 3.5, "deg": 220},
    }


def make_report_payload(intervals: int = 2) -> dict:
    return {
        "location": "Paris, FR",
        "coordinates": {"lat": 48.8566, "lon": 2.3522},
        "forecast": [
            {
                "datetime": f"2024-05-01 {i * 3:02d}:00:00",
                "temperature": 12,
                "humidity": 70,
                "pressure": 1012,
                "description": "light rain",
                "main": "Rain",
                "icon": "10d",
                "windSpeed": 3.5,
                "windDirection": 220,
                "clouds": 90,
            }
            for i in range(intervals)
        ],
    }


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


class FakeUpstream:
    """Stands in for OpenWeather, Gemini and Workers AI behind one MockTransport."""

    def __init__(self) -> None:
        self.geocode: Any = [{"name": "Paris", "country": "FR", "lat": 48.8566, "lon": 2.3522}]
        self.forecast: Any = {"cod": "200", "list": [make_forecast_item(i) for i in range(16)]}
        self.gemini: httpx.Response = httpx.Response(200, json=gemini_reply("Swirling silver rain"))
        self.image: httpx.Response = httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})
        self.calls: List[httpx.Request] = []
        self.error: Optional[Callable[[httpx.Request], Exception]] = None

    def paths(self) -> List[str]:
        return [r.url.path for r in self.calls]

    def json_body(self, path_fragment: str) -> dict:
        request = next(r for r in self.calls if path_fragment in r.url.path)
        return json.loads(request.content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error(request)
        path = request.url.path
        if path.endswith("/geo/1.0/direct"):
            return httpx.Response(200, json=self.geocode)
        if path.endswith("/data/2.5/forecast"):
            return httpx.Response(200, json=self.forecast)
        if ":generateContent" in path:
            return self.gemini
        if "/ai/run/" in path:
            return self.image
        return httpx.Response(404, json={"message": "no route"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


PROVIDER_GETTERS = (get_settings, get_openweather_settings, get_gemini_settings, get_workers_ai_settings)
PROVIDER_ENV = (
    "OPENWEATHER_API_KEY",
    "GEMINI_API_KEY",
    "CLOUDFLARE_ACCOUNT_ID",
    "CLOUDFLARE_API_TOKEN",
)


@pytest.fixture
def fake_request(upstream):
    async def dependency():
        async with aio_requests(transport=upstream.transport()) as request:
            yield request

    return dependency


@pytest.fixture
def client(fake_request):
    from main import app

    app.dependency_overrides[get_settings] = lambda: Settings()
    app.dependency_overrides[get_openweather_settings] = lambda: OpenWeatherSettings(api_key="ow-secret")
    app.dependency_overrides[get_gemini_settings] = lambda: GeminiSettings(api_key="gm-secret")
    app.dependency_overrides[get_workers_ai_settings] = lambda: WorkersAISettings(
        account_id="acct-1", api_token="cf-secret"
    )
    app.dependency_overrides[get_request] = fake_request
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def env_client(fake_request, monkeypatch):
    """Client whose provider settings come from the environment, none set by default."""
    from main import app

    for name in PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    for getter in PROVIDER_GETTERS:
        getter.cache_clear()

    app.dependency_overrides[get_request] = fake_request
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    for getter in PROVIDER_GETTERS:
        getter.cache_clear()
