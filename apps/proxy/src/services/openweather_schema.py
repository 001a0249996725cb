"""Parsed shapes of the OpenWeatherMap 2.5 ``/weather`` and ``/forecast`` payloads.

Required fields are plain annotations, so a payload without them fails
validation. Fields the provider may omit are ``Optional`` with ``None`` as
default, and each ``to_record`` method fills the output defaults in one place.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from services.weather_models import CurrentWeather, ForecastSample

Number = int | float


class _OwmModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SampleCondition(_OwmModel):
    main: str
    icon: str


class Condition(SampleCondition):
    description: str


class CurrentMain(_OwmModel):
    temp: Number
    feels_like: Number
    temp_min: Number
    temp_max: Number
    humidity: Number
    pressure: Number


class Wind(_OwmModel):
    speed: Number
    deg: Optional[Number] = None


class Clouds(_OwmModel):
    all: Optional[Number] = None


class Sys(_OwmModel):
    country: Optional[str] = None
    sunrise: Optional[int] = None
    sunset: Optional[int] = None


class CurrentPayload(_OwmModel):
    main: CurrentMain
    wind: Wind
    weather: list[Condition] = Field(min_length=1)
    name: str
    dt: int
    clouds: Optional[Clouds] = None
    visibility: Optional[Number] = None
    sys: Optional[Sys] = None
    timezone: Optional[int] = None
    coord: Optional[dict[str, float]] = None

    def to_record(self) -> CurrentWeather:
        primary = self.weather[0]
        clouds = self.clouds.all if self.clouds and self.clouds.all is not None else 0
        sys_info = self.sys or Sys()
        return CurrentWeather(
            temp=self.main.temp,
            feels_like=self.main.feels_like,
            temp_min=self.main.temp_min,
            temp_max=self.main.temp_max,
            humidity=self.main.humidity,
            pressure=self.main.pressure,
            wind_speed=self.wind.speed,
            wind_deg=self.wind.deg,
            clouds=clouds,
            visibility=self.visibility,
            conditions=primary.main,
            description=primary.description,
            icon=primary.icon,
            location=self.name,
            country=sys_info.country or "",
            sunrise=sys_info.sunrise,
            sunset=sys_info.sunset,
            timezone=self.timezone if self.timezone is not None else 0,
            dt=self.dt,
            coord=self.coord,
        )


class SampleMain(_OwmModel):
    temp: Number


class ForecastItem(_OwmModel):
    dt: int
    main: SampleMain
    weather: list[SampleCondition] = Field(min_length=1)

    def to_sample(self) -> ForecastSample:
        primary = self.weather[0]
        return ForecastSample(dt=self.dt, temp=self.main.temp, conditions=primary.main, icon=primary.icon)


class ForecastCity(_OwmModel):
    name: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[int] = None


class ForecastPayload(_OwmModel):
    city: Optional[ForecastCity] = None
    samples: list[ForecastItem] = Field(alias="list")

    def header(self) -> tuple[str, str, int]:
        city = self.city or ForecastCity()
        return (
            city.name or "",
            city.country or "",
            city.timezone if city.timezone is not None else 0,
        )
