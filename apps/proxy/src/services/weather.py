import logging
from typing import Optional

from config import settings
from services.cache_keys import build_cache_key
from services.location import Units, resolve_location
from services.openweather import OpenWeatherClient
from services.weather_cache import CacheStore, InMemoryTTLCache
from services.weather_errors import InvalidRequest
from services.weather_models import CurrentWeather, Forecast
from services.weather_normalizer import normalize_current, normalize_forecast

logger = logging.getLogger("weatherproxy.weather")


class WeatherService:
    """Cache-aside front for current conditions and daily forecasts.

    A hit returns the stored record; a miss resolves the location, fetches
    once from the provider, normalizes, stores with a fixed TTL and returns.
    Failed computations are never stored.

    The cache is read and written without a lock, so concurrent misses on the
    same key may each call the provider. The last write wins and every writer
    stores the same logical value, so the cache is never left inconsistent.
    """

    CURRENT_TTL = 60 * 60
    FORECAST_TTL = 3 * 60 * 60

    def __init__(self, client: OpenWeatherClient, cache: CacheStore) -> None:
        self.client = client
        self.cache = cache

    async def close(self) -> None:
        await self.client.close()

    async def get_current_weather(
        self,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        city: Optional[str] = None,
        units: Units | str = Units.METRIC,
    ) -> CurrentWeather:
        unit = Units.parse(units)
        location = resolve_location(lat, lon, city)
        key = build_cache_key("current", location, unit)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("current weather cache hit for %s", key)
            return CurrentWeather.from_payload(cached)

        logger.debug("current weather cache miss for %s", key)
        raw = await self.client.fetch_current(location, unit)
        record = normalize_current(raw)
        self.cache.set(key, record.to_payload(), self.CURRENT_TTL)
        return record

    async def get_weather_forecast(
        self,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
        city: Optional[str] = None,
        days: int = 3,
        units: Units | str = Units.METRIC,
    ) -> Forecast:
        unit = Units.parse(units)
        if isinstance(days, bool) or not isinstance(days, int) or days < 1:
            raise InvalidRequest("days must be a positive integer", field="days")
        location = resolve_location(lat, lon, city)
        key = build_cache_key("forecast", location, unit, days)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("forecast cache hit for %s", key)
            return Forecast.from_payload(cached)

        logger.debug("forecast cache miss for %s", key)
        raw = await self.client.fetch_forecast(location, unit, days)
        forecast = normalize_forecast(raw, days)
        self.cache.set(key, forecast.to_payload(), self.FORECAST_TTL)
        return forecast


def build_weather_service() -> WeatherService:
    client = OpenWeatherClient(
        api_key=settings.openweather_api_key,
        base_url=settings.openweather_base_url,
        timeout=settings.openweather_timeout,
        user_agent=settings.weather_user_agent,
    )
    return WeatherService(client=client, cache=InMemoryTTLCache())


weather_service = build_weather_service()
