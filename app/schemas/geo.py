"""Typed shapes for Google Maps responses.

Raw JSON from the Places, Distance Matrix and Directions endpoints is
narrowed into these models as soon as it is received, so the seeding
pipeline never walks untyped payloads.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    lat: float
    lng: float

    def as_param(self) -> str:
        """Render as the ``"lat,lng"`` form the Google APIs expect."""
        return f"{self.lat},{self.lng}"


def _location(payload: dict[str, Any]) -> Coordinates | None:
    location = (payload.get("geometry") or {}).get("location")
    if not location:
        return None
    return Coordinates(lat=location["lat"], lng=location["lng"])


class PlaceSummary(BaseModel):
    """One text-search hit: a candidate place, not yet a destination."""

    place_id: str
    name: str
    location: Coordinates
    formatted_address: str | None = None
    rating: float | None = None
    types: list[str] = Field(default_factory=list)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "PlaceSummary":
        return cls(
            place_id=payload["place_id"],
            name=payload["name"],
            location=_location(payload),
            formatted_address=payload.get("formatted_address"),
            rating=payload.get("rating"),
            types=payload.get("types") or [],
        )


class PlacePhoto(BaseModel):
    photo_reference: str
    width: int | None = None
    height: int | None = None
    html_attributions: list[str] = Field(default_factory=list)


class PlaceDetails(BaseModel):
    """Place Details ``result`` object.

    ``raw`` keeps the untouched payload; it is what goes into the places
    cache so a cached lookup rebuilds exactly the same model.
    """

    place_id: str
    name: str
    formatted_address: str | None = None
    rating: float | None = None
    user_ratings_total: int | None = None
    types: list[str] = Field(default_factory=list)
    website: str | None = None
    phone_number: str | None = None
    opening_hours: dict[str, Any] | None = None
    reviews: list[dict[str, Any]] = Field(default_factory=list)
    editorial_summary: str | None = None
    location: Coordinates | None = None
    photos: list[PlacePhoto] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)

    @classmethod
    def from_api(cls, place_id: str, payload: dict[str, Any]) -> "PlaceDetails":
        return cls(
            place_id=place_id,
            name=payload.get("name", ""),
            formatted_address=payload.get("formatted_address"),
            rating=payload.get("rating"),
            user_ratings_total=payload.get("user_ratings_total"),
            types=payload.get("types") or [],
            website=payload.get("website"),
            phone_number=payload.get("formatted_phone_number"),
            opening_hours=payload.get("opening_hours"),
            reviews=payload.get("reviews") or [],
            editorial_summary=(payload.get("editorial_summary") or {}).get("overview"),
            location=_location(payload),
            photos=[PlacePhoto.model_validate(p) for p in payload.get("photos") or []],
            raw=payload,
        )


class TransitFare(BaseModel):
    value: float
    currency: str | None = None
    text: str | None = None


class DistanceResult(BaseModel):
    """Distance and duration for one origin/destination pair.

    Batch lookups substitute a zero placeholder for elements the API could
    not route; ``status`` then carries the element status and
    ``is_reachable`` is ``False``. Never read the zeros as a real distance.
    """

    distance_km: int
    duration_minutes: int
    cached: bool = False
    status: str = "OK"
    fare: TransitFare | None = None

    @property
    def is_reachable(self) -> bool:
        return self.status == "OK" and self.distance_km > 0

    @classmethod
    def unreachable(cls, status: str) -> "DistanceResult":
        return cls(distance_km=0, duration_minutes=0, status=status)


class Waypoint(BaseModel):
    name: str
    lat: float
    lng: float


class DirectionsResult(BaseModel):
    polyline: str
    waypoints: list[Waypoint]
    distance_text: str | None = None
    duration_text: str | None = None
