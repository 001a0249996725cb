from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from services.location import ResolvedLocation, Units
from services.weather_errors import UpstreamUnavailable

logger = logging.getLogger("weatherproxy.weather.upstream")

LANGUAGE = "en"
SAMPLES_PER_DAY = 8  # provider returns 3-hour steps


class OpenWeatherClient:
    """Thin async client for the OpenWeatherMap ``/weather`` and ``/forecast`` endpoints.

    One GET per call and no retries. Every transport problem (timeout,
    connection error, non-2xx status, unreadable body) is raised as
    :class:`UpstreamUnavailable`.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        timeout: float = 10.0,
        user_agent: str | None = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._user_agent = user_agent
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._user_agent:
                headers["User-Agent"] = self._user_agent
            self._client = httpx.AsyncClient(timeout=self._timeout, headers=headers)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def build_params(self, location: ResolvedLocation, units: Units, *, days: int | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {
            "appid": self._api_key,
            "units": units.value,
            "lang": LANGUAGE,
        }
        params.update(location.query_params())
        if days is not None:
            params["cnt"] = days * SAMPLES_PER_DAY
        return params

    async def fetch_current(self, location: ResolvedLocation, units: Units) -> dict[str, Any]:
        return await self._get_json("/weather", self.build_params(location, units))

    async def fetch_forecast(self, location: ResolvedLocation, units: Units, days: int) -> dict[str, Any]:
        return await self._get_json("/forecast", self.build_params(location, units, days=days))

    async def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        client = await self._get_client()
        logger.debug("Fetching %s (units=%s)", url, params.get("units"))
        try:
            response = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("OpenWeather request to %s timed out: %s", path, exc)
            raise UpstreamUnavailable("Weather provider timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("OpenWeather request to %s failed: %s", path, exc)
            raise UpstreamUnavailable("Weather provider unreachable") from exc

        if not response.is_success:
            logger.warning(
                "OpenWeather %s returned %s: %s",
                path,
                response.status_code,
                response.text[:200],
            )
            raise UpstreamUnavailable(
                f"Weather provider returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("OpenWeather %s returned a non-JSON body", path)
            raise UpstreamUnavailable("Weather provider returned an unreadable body", status_code=response.status_code) from exc
        if not isinstance(payload, dict):
            raise UpstreamUnavailable("Weather provider returned an unexpected body", status_code=response.status_code)
        return payload


__all__ = ["OpenWeatherClient", "LANGUAGE", "SAMPLES_PER_DAY"]
