from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from statistics import fmean
from typing import Any, Iterable, Sequence

from pydantic import ValidationError

from services.openweather_schema import CurrentPayload, ForecastPayload
from services.weather_errors import MalformedUpstreamResponse
from services.weather_models import CurrentWeather, Forecast, ForecastDay, ForecastSample

logger = logging.getLogger("weatherproxy.weather.normalizer")


def _describe(exc: ValidationError) -> str:
    fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
    return ", ".join(fields) or "payload"


def normalize_current(raw: Any) -> CurrentWeather:
    try:
        payload = CurrentPayload.model_validate(raw)
    except ValidationError as exc:
        raise MalformedUpstreamResponse(f"Current weather response missing or invalid: {_describe(exc)}") from exc
    return payload.to_record()


def normalize_forecast(raw: Any, days: int) -> Forecast:
    try:
        payload = ForecastPayload.model_validate(raw)
    except ValidationError as exc:
        raise MalformedUpstreamResponse(f"Forecast response missing or invalid: {_describe(exc)}") from exc
    city, country, tz_offset = payload.header()
    samples = [item.to_sample() for item in payload.samples]
    forecast = Forecast(city=city, country=country, timezone=tz_offset, days=aggregate_forecast_days(samples, days))
    logger.debug("Aggregated %s samples into %s days for %r", len(samples), len(forecast.days), city)
    return forecast


def sample_date(dt: int) -> str:
    return datetime.fromtimestamp(dt, tz=timezone.utc).date().isoformat()


def dominant(labels: Iterable[str]) -> str:
    """Most frequent label; ties go to the label seen first."""
    ranked = Counter(labels).most_common(1)
    return ranked[0][0] if ranked else ""


def aggregate_forecast_days(samples: Sequence[ForecastSample], days: int) -> list[ForecastDay]:
    """Group samples by calendar day and summarise each day.

    Days come out in the order their first sample appears. Only the first
    ``days`` buckets are kept; later ones are dropped, never reordered.
    """
    if days <= 0:
        return []

    buckets: dict[str, list[ForecastSample]] = {}
    for sample in samples:
        buckets.setdefault(sample_date(sample.dt), []).append(sample)

    result: list[ForecastDay] = []
    for date, bucket in buckets.items():
        if len(result) >= days:
            break
        temps = [sample.temp for sample in bucket]
        result.append(
            ForecastDay(
                date=date,
                temp_avg=fmean(temps),
                temp_min=min(temps),
                temp_max=max(temps),
                conditions=dominant(sample.conditions for sample in bucket),
                icon=dominant(sample.icon for sample in bucket),
            )
        )
    return result


__all__ = [
    "aggregate_forecast_days",
    "dominant",
    "normalize_current",
    "normalize_forecast",
    "sample_date",
]
