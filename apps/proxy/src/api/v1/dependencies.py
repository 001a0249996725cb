from __future__ import annotations

from fastapi import Query

from services.location import ResolvedLocation, resolve_location
from services.weather import WeatherService, weather_service
from services.weather_errors import InvalidRequest


def get_weather_service() -> WeatherService:
    return weather_service


def get_location(
    lat: float | None = Query(default=None, ge=-90.0, le=90.0, description="Latitude (required with lon)"),
    lon: float | None = Query(default=None, ge=-180.0, le=180.0, description="Longitude (required with lat)"),
    city: str | None = Query(
        default=None,
        max_length=100,
        description="City name (required if lat/lon not provided)",
    ),
) -> ResolvedLocation:
    if lat is not None and lon is None:
        raise InvalidRequest("The lon field is required when lat is present.", field="lon")
    if lon is not None and lat is None:
        raise InvalidRequest("The lat field is required when lon is present.", field="lat")
    if lat is None and (city is None or not city.strip()):
        raise InvalidRequest("The city field is required when lat / lon are not present.", field="city")
    return resolve_location(lat, lon, city)
