from __future__ import annotations

from sqlalchemy import JSON, Enum, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base, TimestampMixin
from app.models.city_destination import TransportMode


class DistanceMatrixCache(TimestampMixin, Base):
    """Cache for single-pair Distance Matrix lookups.

    Keyed by the exact origin/destination coordinates and transport mode.
    Rows are append-only and never invalidated.
    """

    __tablename__ = "distance_matrix_cache"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    origin_lat: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    origin_lng: Mapped[float] = mapped_column(Float, nullable=False)
    destination_lat: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    destination_lng: Mapped[float] = mapped_column(Float, nullable=False)
    transport_mode: Mapped[TransportMode] = mapped_column(
        Enum(
            TransportMode,
            name="transport_mode",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    distance_meters: Mapped[int] = mapped_column(Integer, nullable=False)
    duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    distance_text: Mapped[str | None] = mapped_column(String(64), nullable=True)
    duration_text: Mapped[str | None] = mapped_column(String(64), nullable=True)


class PlacesCache(TimestampMixin, Base):
    """Cache for Place Details responses, keyed by Google place id.

    ``full_response`` holds the complete ``result`` object; the other columns
    are denormalized copies for ad-hoc querying.
    """

    __tablename__ = "places_cache"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    place_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    formatted_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    user_ratings_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
    types: Mapped[list | None] = mapped_column(JSON, nullable=True)
    opening_hours: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    website: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reviews: Mapped[list | None] = mapped_column(JSON, nullable=True)
    full_response: Mapped[dict] = mapped_column(JSON, nullable=False)
