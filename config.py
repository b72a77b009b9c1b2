from functools import lru_cache
from typing import Optional, Type, TypeVar

from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import ConfigurationError


def _ConfigDict(env_prefix: str) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix=env_prefix,
        extra="allow",
    )


class OpenWeatherSettings(BaseSettings):
    model_config = _ConfigDict("openweather_")
    api_key: SecretStr
    geocoding_url: str = "https://api.openweathermap.org/geo/1.0/direct"
    forecast_url: str = "https://api.openweathermap.org/data/2.5/forecast"
    forecast_intervals: int = 8


class GeminiSettings(BaseSettings):
    model_config = _ConfigDict("gemini_")
    api_key: SecretStr
    endpoint: str = "https://generativelanguage.googleapis.com/v1beta/models"
    model: str = "gemini-2.0-flash"
    max_output_tokens: int = 300
    temperature: float = 0.7


class WorkersAISettings(BaseSettings):
    model_config = _ConfigDict("cloudflare_")
    account_id: str
    api_token: SecretStr
    base_url: str = "https://api.cloudflare.com/client/v4"


class Settings(BaseSettings):
    """Centralised runtime configuration shared by every route."""

    # Outbound HTTP timeout in seconds; unset means wait as long as the host allows
    http_timeout: Optional[float] = None

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


S = TypeVar("S", bound=BaseSettings)


def _load(settings_cls: Type[S], provider: str) -> S:
    """Build one provider group, reporting missing variables by name only."""
    try:
        return settings_cls()
    except ValidationError as e:
        prefix = settings_cls.model_config.get("env_prefix", "")
        names = sorted({f"{prefix}{err['loc'][0]}".upper() for err in e.errors() if err["loc"]})
        # no chaining: the pydantic error echoes the values that were provided
        raise ConfigurationError(f"{provider} is not configured: check {', '.join(names)}") from None


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_openweather_settings() -> OpenWeatherSettings:
    return _load(OpenWeatherSettings, "OpenWeather")


@lru_cache
def get_gemini_settings() -> GeminiSettings:
    return _load(GeminiSettings, "Gemini")


@lru_cache
def get_workers_ai_settings() -> WorkersAISettings:
    return _load(WorkersAISettings, "Workers AI")
