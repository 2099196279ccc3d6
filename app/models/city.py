from __future__ import annotations

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base, TimestampMixin


class City(TimestampMixin, Base):
    """Origin city that weekend getaways are measured from.

    Attributes:
        name: Display name (e.g. ``"Pune"``).
        slug: URL slug, unique. Derived from the name by lowercasing and
            replacing spaces with hyphens.
        state: Region/state label. Cities created by seeding get ``"Unknown"``.
        latitude: City centre latitude, used as the origin of every route.
        longitude: City centre longitude.
        is_active: Whether the city is listed publicly.
    """

    __tablename__ = "cities"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    state: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, server_default="true")
