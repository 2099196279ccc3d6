from __future__ import annotations

from enum import StrEnum

from sqlalchemy import JSON, Enum, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base, TimestampMixin
from app.models.city import City
from app.models.destination import Destination


class TransportMode(StrEnum):
    DRIVING = "driving"
    TRANSIT = "transit"


class CityDestination(TimestampMixin, Base):
    """Transport option between a city and a destination for one mode.

    One row per (city, destination, transport mode). Seeding upserts on that
    triple, so re-running a city refreshes rows instead of duplicating them.

    Attributes:
        distance_km: Road/transit distance in whole kilometres.
        travel_time_minutes: Travel time in whole minutes.
        estimated_fuel_cost: Driving fare total (fuel + toll); ``None`` for transit.
        estimated_transport_cost: Taxi estimate for driving, train (or bus)
            fare for transit.
        route_polyline: Encoded overview polyline, when directions were available.
        major_waypoints: Ordered ``[{"name", "lat", "lng"}, ...]``.
        fare_details: Mode-specific fare components.
        booking_links: External booking URL per fare component.
    """

    __tablename__ = "city_destinations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    city_id: Mapped[int] = mapped_column(
        ForeignKey(City.id, ondelete="CASCADE"), nullable=False, index=True
    )
    city: Mapped[City] = relationship(City)
    destination_id: Mapped[int] = mapped_column(
        ForeignKey(Destination.id, ondelete="CASCADE"), nullable=False, index=True
    )
    destination: Mapped[Destination] = relationship(Destination)

    transport_mode: Mapped[TransportMode] = mapped_column(
        Enum(
            TransportMode,
            name="transport_mode",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )

    distance_km: Mapped[int] = mapped_column(Integer, nullable=False)
    travel_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    estimated_fuel_cost: Mapped[int | None] = mapped_column(Integer, nullable=True)
    estimated_transport_cost: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    route_polyline: Mapped[str | None] = mapped_column(Text, nullable=True)
    major_waypoints: Mapped[list | None] = mapped_column(JSON, nullable=True)
    fare_details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    booking_links: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "city_id",
            "destination_id",
            "transport_mode",
            name="uq_city_destination_mode",
        ),
    )
