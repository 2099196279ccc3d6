from __future__ import annotations

from sqlalchemy import JSON, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base, TimestampMixin


class Destination(TimestampMixin, Base):
    """A weekend-getaway destination, shared by every city it is linked to.

    ``category`` is one of the seeded codes (``hill_station``, ``beach``,
    ``historical``, ``nature``, ``spiritual``, ``wildlife``, ``adventure``) or
    a free-form value entered by an admin.

    The JSON snapshots are refreshed on every seeding run that touches the
    destination:

    - ``weather_info``: ``{"temp": int, "condition": str, "humidity": int}``
    - ``air_quality``: ``{"aqi": int, "status": str}``
    - ``best_visit_time``: ``{"best_months": [str, ...]}``
    """

    __tablename__ = "destinations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    short_summary: Mapped[str] = mapped_column(Text, nullable=False)
    ai_enhanced_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    weather_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    air_quality: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    best_visit_time: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    is_active: Mapped[bool] = mapped_column(default=True, server_default="true")

    photos: Mapped[list["DestinationPhoto"]] = relationship(
        back_populates="destination", cascade="all, delete-orphan"
    )


class DestinationPhoto(TimestampMixin, Base):
    """Photo captured from the Places API for a destination.

    At most one photo per destination is expected to be primary; this is not
    enforced by a constraint.
    """

    __tablename__ = "destination_photos"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    destination_id: Mapped[int] = mapped_column(
        ForeignKey(Destination.id, ondelete="CASCADE"), nullable=False, index=True
    )
    destination: Mapped[Destination] = relationship(back_populates="photos")

    photo_url: Mapped[str] = mapped_column(Text, nullable=False)
    photo_reference: Mapped[str | None] = mapped_column(Text, nullable=True)
    width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    attribution: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_primary: Mapped[bool] = mapped_column(default=False, server_default="false")
