from __future__ import annotations


class WeatherError(RuntimeError):
    """Base class for every failure surfaced by the weather service."""


class MissingLocation(WeatherError):
    """Neither a usable coordinate pair nor a city name was supplied."""

    def __init__(self, message: str = "Either lat/lon or city must be provided") -> None:
        super().__init__(message)


class InvalidRequest(WeatherError):
    """A request parameter is out of range or of the wrong kind."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class UpstreamUnavailable(WeatherError):
    """The provider could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedUpstreamResponse(WeatherError):
    """The provider answered 200 but a required field is missing or unusable."""


__all__ = [
    "WeatherError",
    "MissingLocation",
    "InvalidRequest",
    "UpstreamUnavailable",
    "MalformedUpstreamResponse",
]
