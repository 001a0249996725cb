from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

Number = int | float


@dataclass(slots=True)
class CurrentWeather:
    """Normalized current conditions, in the units the caller asked for."""

    temp: Number
    feels_like: Number
    temp_min: Number
    temp_max: Number
    humidity: Number
    pressure: Number
    wind_speed: Number
    wind_deg: Optional[Number]
    clouds: Number
    visibility: Optional[Number]
    conditions: str
    description: str
    icon: str
    location: str
    country: str
    sunrise: Optional[int]
    sunset: Optional[int]
    timezone: int
    dt: int
    coord: Optional[dict[str, float]] = None

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "CurrentWeather":
        return cls(**copy.deepcopy(payload))


@dataclass(slots=True)
class ForecastDay:
    date: str
    temp_avg: float
    temp_min: Number
    temp_max: Number
    conditions: str
    icon: str


@dataclass(slots=True)
class Forecast:
    city: str
    country: str
    timezone: int
    days: list[ForecastDay] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Forecast":
        return cls(
            city=payload["city"],
            country=payload["country"],
            timezone=payload["timezone"],
            days=[ForecastDay(**day) for day in payload.get("days", [])],
        )


@dataclass(frozen=True, slots=True)
class ForecastSample:
    """One 3-hour provider sample reduced to what daily aggregation needs."""

    dt: int
    temp: Number
    conditions: str
    icon: str


__all__ = ["CurrentWeather", "Forecast", "ForecastDay", "ForecastSample"]
