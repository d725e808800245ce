from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any

from airport_resolver.app.http import ApiError, RetryingClient, safe_json


logger = logging.getLogger(__name__)


GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

FORECAST_DAYS = 7


@dataclass(frozen=True)
class ForecastDay:
    date: str
    temp_max_c: float | None
    temp_min_c: float | None
    precipitation_mm: float | None


@dataclass(frozen=True)
class ForecastLocation:
    name: str
    country: str | None
    latitude: float
    longitude: float
    timezone: str | None


@dataclass(frozen=True)
class ForecastSummary:
    headline: str
    avg_max_c: float | None
    avg_min_c: float | None
    total_precipitation_mm: float


@dataclass(frozen=True)
class WeatherForecast:
    location: ForecastLocation
    summary: ForecastSummary
    daily: list[ForecastDay] = field(default_factory=list)
    provider: str = "Open-Meteo"


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _at(values: Any, idx: int) -> Any:
    if isinstance(values, list) and idx < len(values):
        return values[idx]
    return None


def summarize_days(days: list[ForecastDay]) -> ForecastSummary:
    # Averages only count days with both temperatures present.
    paired = [(d.temp_max_c, d.temp_min_c) for d in days if d.temp_max_c is not None and d.temp_min_c is not None]
    rain = sum(d.precipitation_mm for d in days if d.precipitation_mm is not None)

    avg_max = sum(p[0] for p in paired) / len(paired) if paired else None
    avg_min = sum(p[1] for p in paired) / len(paired) if paired else None

    headline = "Mixed conditions"
    if avg_max is not None and avg_min is not None:
        if avg_max >= 25 and rain < 5:
            headline = "Warm and mostly dry, great beach or pool weather."
        elif avg_max >= 20 and rain < 10:
            headline = "Mild and generally pleasant with only light rain."
        elif avg_max < 10:
            headline = "Chilly overall, pack layers and a warm jacket."
        elif rain >= 15:
            headline = "Expect a fair bit of rain, an umbrella is a good idea."

    return ForecastSummary(headline=headline, avg_max_c=avg_max, avg_min_c=avg_min, total_precipitation_mm=rain)


def fetch_weather_forecast(city: str, *, http: RetryingClient) -> WeatherForecast | None:
    """7-day forecast summary for a city, or None when the city is unknown.

    Upstream failures raise ``ApiError``.
    """
    geo_resp = http.get(
        GEOCODING_URL,
        params={"name": city, "count": 1, "language": "en", "format": "json"},
    )
    geo_data = safe_json(geo_resp)
    results = geo_data.get("results") if isinstance(geo_data, dict) else None
    place = results[0] if isinstance(results, list) and results else None
    if not isinstance(place, dict):
        logger.info("No weather location found", extra={"city": city})
        return None

    lat = _number(place.get("latitude"))
    lon = _number(place.get("longitude"))
    if lat is None or lon is None:
        raise ApiError("Geocoding result has no coordinates", status=geo_resp.status_code, code="UPSTREAM_BAD_RESPONSE")

    forecast_resp = http.get(
        FORECAST_URL,
        params={
            "latitude": lat,
            "longitude": lon,
            "daily": "temperature_2m_max,temperature_2m_min,precipitation_sum",
            "timezone": "auto",
            "forecast_days": FORECAST_DAYS,
        },
    )
    forecast_data = safe_json(forecast_resp)
    daily = forecast_data.get("daily") if isinstance(forecast_data, dict) else None
    if (
        not isinstance(daily, dict)
        or not isinstance(daily.get("time"), list)
        or not isinstance(daily.get("temperature_2m_max"), list)
    ):
        logger.warning("Unexpected forecast shape", extra={"city": city, "payload": forecast_data})
        raise ApiError("Unexpected forecast response shape", status=forecast_resp.status_code, code="UPSTREAM_BAD_RESPONSE")

    days = [
        ForecastDay(
            date=str(day),
            temp_max_c=_number(_at(daily.get("temperature_2m_max"), idx)),
            temp_min_c=_number(_at(daily.get("temperature_2m_min"), idx)),
            precipitation_mm=_number(_at(daily.get("precipitation_sum"), idx)),
        )
        for idx, day in enumerate(daily["time"])
    ]

    return WeatherForecast(
        location=ForecastLocation(
            name=str(place.get("name") or city),
            country=place.get("country"),
            latitude=lat,
            longitude=lon,
            timezone=place.get("timezone"),
        ),
        summary=summarize_days(days),
        daily=days,
    )
