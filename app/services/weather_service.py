from __future__ import annotations

from typing import Any

import httpx

from app.core.logging import logger
from app.schemas.enrichment import AirQualitySnapshot, WeatherReport, WeatherSnapshot
from app.services.geo_common import round_half_up

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
OPEN_METEO_AIR_QUALITY_URL = "https://air-quality-api.open-meteo.com/v1/air-quality"

# Used when the air-quality endpoint reports no value.
DEFAULT_AQI = 50

# (exclusive upper bound, label) in ascending order; first match wins.
_WEATHER_CODE_BUCKETS: tuple[tuple[int, str], ...] = (
    (1, "Clear sky"),
    (4, "Partly cloudy"),
    (50, "Foggy"),
    (60, "Drizzle"),
    (70, "Rain"),
    (80, "Snow"),
)

# (inclusive upper bound, label)
_AQI_BUCKETS: tuple[tuple[int, str], ...] = (
    (50, "Good"),
    (100, "Moderate"),
    (150, "Unhealthy for Sensitive Groups"),
)


def weather_condition(code: int) -> str:
    """Map a WMO weather code to a coarse condition label."""
    for upper, label in _WEATHER_CODE_BUCKETS:
        if code < upper:
            return label
    return "Thunderstorm"


def aqi_status(aqi: float) -> str:
    """Map a US AQI value to its status label."""
    for upper, label in _AQI_BUCKETS:
        if aqi <= upper:
            return label
    return "Unhealthy"


async def get_real_weather_and_aqi(
    lat: float,
    lng: float,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float = 10.0,
) -> WeatherReport | None:
    """Fetch current weather and air quality from Open-Meteo.

    Open-Meteo needs no credential. Any transport, HTTP or payload problem is
    logged and reported as ``None``; callers skip enrichment in that case.
    """
    try:
        if client is not None:
            weather_data, aqi_data = await _fetch_both(client, lat, lng)
        else:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                weather_data, aqi_data = await _fetch_both(own_client, lat, lng)

        current = weather_data["current"]
        aqi_value = (aqi_data.get("current") or {}).get("us_aqi") or DEFAULT_AQI
        return WeatherReport(
            weather=WeatherSnapshot(
                temp=round_half_up(current["temperature_2m"]),
                condition=weather_condition(int(current["weather_code"])),
                humidity=current.get("relative_humidity_2m"),
            ),
            aqi=AirQualitySnapshot(aqi=aqi_value, status=aqi_status(aqi_value)),
        )
    except Exception as exc:
        logger.warning("Open-Meteo lookup failed for %s,%s: %s", lat, lng, exc)
        return None


async def _fetch_both(
    client: httpx.AsyncClient, lat: float, lng: float
) -> tuple[dict[str, Any], dict[str, Any]]:
    weather_resp = await client.get(
        OPEN_METEO_FORECAST_URL,
        params={
            "latitude": lat,
            "longitude": lng,
            "current": "temperature_2m,relative_humidity_2m,weather_code",
        },
    )
    weather_resp.raise_for_status()

    aqi_resp = await client.get(
        OPEN_METEO_AIR_QUALITY_URL,
        params={"latitude": lat, "longitude": lng, "current": "us_aqi"},
    )
    aqi_resp.raise_for_status()
    return weather_resp.json(), aqi_resp.json()
