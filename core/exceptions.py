from __future__ import annotations


class ArtForecastError(Exception):
    """Base class for every failure the pipeline reports to a caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ArtForecastError):
    """Missing or malformed request fields."""

    status_code = 400


class ConfigurationError(ArtForecastError):
    """A provider's credentials or settings are missing from the environment."""


class NotFoundError(ArtForecastError):
    """The geocoder returned no match for the requested location."""


class UpstreamError(ArtForecastError):
    """A downstream API answered with a non-success status or could not be reached."""

    def __init__(self, message: str, *, provider: str, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.upstream_status = status_code


class GenerationError(ArtForecastError):
    """The image backend produced nothing usable."""
