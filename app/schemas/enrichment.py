from __future__ import annotations

from pydantic import BaseModel


class WeatherSnapshot(BaseModel):
    temp: int
    condition: str
    humidity: float | None = None


class AirQualitySnapshot(BaseModel):
    aqi: float
    status: str


class WeatherReport(BaseModel):
    """Live conditions at a destination, as stored on the destination row."""

    weather: WeatherSnapshot
    aqi: AirQualitySnapshot


class BestVisitTime(BaseModel):
    best_months: list[str]


class FareEstimate(BaseModel):
    """Fare components for one transport mode plus a booking link per component.

    Driving: ``fuel``, ``toll``, ``total``, ``taxi``; links ``rental``, ``taxi``.
    Transit: ``bus``, ``train``; links ``bus``, ``train``.
    """

    fare: dict[str, int | float]
    links: dict[str, str]
