import sys
from pathlib import Path
from typing import Any, Callable, Dict

ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import pytest
from fastapi.testclient import TestClient

from api.v1.dependencies import get_weather_service
from config import settings
from main import create_app
from services.location import ResolvedLocation, Units
from services.weather import WeatherService
from services.weather_cache import InMemoryTTLCache


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings_override() -> Callable[..., None]:
    original: Dict[str, Any] = {}

    def _apply(**overrides: Any) -> None:
        for key, value in overrides.items():
            if key not in original:
                original[key] = getattr(settings, key)
            setattr(settings, key, value)

    yield _apply

    for key, value in original.items():
        setattr(settings, key, value)


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingCache(InMemoryTTLCache):
    """In-memory cache that also remembers every ``set`` call."""

    def __init__(self, time_func: Callable[[], float]) -> None:
        super().__init__(time_func=time_func)
        self.writes: list[tuple[str, Any, float]] = []

    def set(self, key: str, value: Any, ttl: float) -> None:
        self.writes.append((key, value, ttl))
        super().set(key, value, ttl)


class StubOpenWeatherClient:
    """Stands in for OpenWeatherClient: canned payloads or errors, with call log."""

    def __init__(
        self,
        *,
        current: Any = None,
        forecast: Any = None,
        error: Exception | None = None,
    ) -> None:
        self.current = current
        self.forecast = forecast
        self.error = error
        self.current_calls: list[tuple[ResolvedLocation, Units]] = []
        self.forecast_calls: list[tuple[ResolvedLocation, Units, int]] = []
        self.closed = False

    async def fetch_current(self, location: ResolvedLocation, units: Units) -> Any:
        self.current_calls.append((location, units))
        if self.error is not None:
            raise self.error
        return self.current

    async def fetch_forecast(self, location: ResolvedLocation, units: Units, days: int) -> Any:
        self.forecast_calls.append((location, units, days))
        if self.error is not None:
            raise self.error
        return self.forecast

    async def close(self) -> None:
        self.closed = True


def london_current_payload() -> dict[str, Any]:
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "base": "stations",
        "main": {
            "temp": 15.2,
            "feels_like": 14.6,
            "temp_min": 13.9,
            "temp_max": 16.1,
            "pressure": 1012,
            "humidity": 77,
        },
        "visibility": 10000,
        "wind": {"speed": 4.63, "deg": 240},
        "clouds": {"all": 75},
        "dt": 1717236000,
        "sys": {"type": 2, "id": 2075535, "country": "GB", "sunrise": 1717213505, "sunset": 1717272662},
        "timezone": 3600,
        "id": 2643743,
        "name": "London",
        "cod": 200,
    }


def forecast_sample(dt: int, temp: float, main: str = "Clear", icon: str = "01d") -> dict[str, Any]:
    return {
        "dt": dt,
        "main": {"temp": temp, "feels_like": temp, "humidity": 60},
        "weather": [{"id": 800, "main": main, "description": main.lower(), "icon": icon}],
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_store(clock: FakeClock) -> RecordingCache:
    return RecordingCache(time_func=clock)


@pytest.fixture
def stub_client() -> StubOpenWeatherClient:
    return StubOpenWeatherClient(current=london_current_payload())


@pytest.fixture
def service(stub_client: StubOpenWeatherClient, cache_store: RecordingCache) -> WeatherService:
    return WeatherService(client=stub_client, cache=cache_store)


@pytest.fixture
def client(service: WeatherService) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_weather_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def current_payload() -> dict[str, Any]:
    return london_current_payload()


@pytest.fixture
def make_sample() -> Callable[..., dict[str, Any]]:
    return forecast_sample


@pytest.fixture
def make_stub_client() -> type[StubOpenWeatherClient]:
    return StubOpenWeatherClient
