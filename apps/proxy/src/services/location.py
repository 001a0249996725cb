from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from services.weather_errors import InvalidRequest, MissingLocation

LAT_RANGE = (-90.0, 90.0)
LON_RANGE = (-180.0, 180.0)


class Units(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"

    @classmethod
    def parse(cls, value: "Units | str | None") -> "Units":
        if value is None:
            return cls.METRIC
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidRequest(f"Unsupported units '{value}'", field="units") from exc


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    """Canonical location handed to the upstream client and the cache key builder.

    Exactly one form is populated: ``lat``/``lon`` for coordinates, ``city``
    otherwise.
    """

    lat: Optional[float] = None
    lon: Optional[float] = None
    city: Optional[str] = None

    @property
    def is_coordinates(self) -> bool:
        return self.lat is not None and self.lon is not None

    def query_params(self) -> dict[str, Any]:
        if self.is_coordinates:
            return {"lat": self.lat, "lon": self.lon}
        return {"q": self.city}

    def canonical(self) -> str:
        if self.is_coordinates:
            return f"coord:{self.lat:.4f},{self.lon:.4f}"
        return f"city:{(self.city or '').strip().lower()}"


def _as_coordinate(value: Any, name: str, bounds: tuple[float, float]) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRequest(f"{name} must be numeric", field=name) from exc
    low, high = bounds
    if not low <= number <= high:
        raise InvalidRequest(f"{name} must be between {low:g} and {high:g}", field=name)
    return number


def resolve_location(
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    city: Optional[str] = None,
) -> ResolvedLocation:
    """Turn the optional query pieces into a single location.

    Coordinates win whenever both halves are present, even if ``city`` is
    also set. The boundary validates input first, but nothing here assumes it
    did.
    """
    if lat is not None and lon is not None:
        return ResolvedLocation(
            lat=_as_coordinate(lat, "lat", LAT_RANGE),
            lon=_as_coordinate(lon, "lon", LON_RANGE),
        )
    if isinstance(city, str) and city.strip():
        return ResolvedLocation(city=city.strip())
    raise MissingLocation()


__all__ = ["ResolvedLocation", "Units", "resolve_location"]
