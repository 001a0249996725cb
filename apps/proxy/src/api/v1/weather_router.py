from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from services.location import ResolvedLocation, Units
from services.weather import WeatherService
from .dependencies import get_location, get_weather_service

router = APIRouter(prefix="/weather", tags=["weather"])

DEFAULT_FORECAST_DAYS = 3
MAX_FORECAST_DAYS = 5

Number = int | float


class CurrentWeatherData(BaseModel):
	temp: Number
	feels_like: Number
	temp_min: Number
	temp_max: Number
	humidity: Number = Field(description="Relative humidity %")
	pressure: Number = Field(description="Sea-level pressure in hPa")
	wind_speed: Number = Field(description="m/s for metric, mph for imperial")
	wind_deg: Number | None = None
	clouds: Number = Field(default=0, description="Cloud cover %")
	visibility: Number | None = Field(default=None, description="Visibility in metres")
	conditions: str
	description: str
	icon: str
	location: str
	country: str = ""
	sunrise: int | None = None
	sunset: int | None = None
	timezone: int = Field(default=0, description="Shift in seconds from UTC")
	dt: int = Field(description="Observation time, unix seconds")
	coord: dict[str, float] | None = None


class ForecastDayData(BaseModel):
	date: str
	temp_avg: float
	temp_min: Number
	temp_max: Number
	conditions: str = Field(description="Most frequent condition label for the day")
	icon: str = Field(description="Most frequent icon code for the day")


class ForecastData(BaseModel):
	city: str
	country: str
	timezone: int
	days: list[ForecastDayData]


class CurrentWeatherResponse(BaseModel):
	success: bool = True
	data: CurrentWeatherData
	message: str


class ForecastResponse(BaseModel):
	success: bool = True
	data: ForecastData
	message: str


def validate_units(units: Units = Query(Units.METRIC, description="metric or imperial")) -> Units:
	return units


def validate_days(
	days: int = Query(
		DEFAULT_FORECAST_DAYS,
		ge=1,
		le=MAX_FORECAST_DAYS,
		description="Number of forecast days (max 5 for free tier)",
	),
) -> int:
	return days


@router.get("", response_model=CurrentWeatherResponse)
async def get_current_weather(
	location: ResolvedLocation = Depends(get_location),
	units: Units = Depends(validate_units),
	service: WeatherService = Depends(get_weather_service),
) -> CurrentWeatherResponse:
	record = await service.get_current_weather(location.lat, location.lon, location.city, units=units)
	return CurrentWeatherResponse(
		data=CurrentWeatherData(**record.to_payload()),
		message="Weather data retrieved successfully",
	)


@router.get("/forecast", response_model=ForecastResponse)
async def get_weather_forecast(
	location: ResolvedLocation = Depends(get_location),
	days: int = Depends(validate_days),
	units: Units = Depends(validate_units),
	service: WeatherService = Depends(get_weather_service),
) -> ForecastResponse:
	forecast = await service.get_weather_forecast(location.lat, location.lon, location.city, days=days, units=units)
	return ForecastResponse(
		data=ForecastData(**forecast.to_payload()),
		message="Weather forecast retrieved successfully",
	)
