"""Persistence operations the seeding pipeline needs.

The orchestrator talks to a :class:`SeedStore` rather than to a session
directly, so it can be run against the database (:class:`SqlSeedStore`) or
an in-memory store in tests. Every write commits immediately: a run that dies
halfway keeps what it created, and re-seeding the same city picks up from
there through de-duplication.
"""

from __future__ import annotations

from typing import Any, Protocol

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import logger
from app.models.city import City
from app.models.city_destination import CityDestination, TransportMode
from app.models.destination import Destination, DestinationPhoto
from app.services.geo_common import city_slug


class SeedStore(Protocol):
    async def find_city(self, name: str) -> City | None: ...

    async def add_city(self, city: City) -> City: ...

    async def find_destination_by_slug(self, slug: str) -> Destination | None: ...

    async def is_linked(self, city_id: int, destination_id: int) -> bool: ...

    async def add_destination(self, destination: Destination) -> Destination: ...

    async def add_photo(self, photo: DestinationPhoto) -> DestinationPhoto: ...

    async def update_destination_enrichment(
        self,
        destination_id: int,
        *,
        weather_info: dict[str, Any] | None,
        air_quality: dict[str, Any] | None,
        best_visit_time: dict[str, Any],
    ) -> None: ...

    async def upsert_city_destination(
        self,
        city_id: int,
        destination_id: int,
        mode: TransportMode,
        values: dict[str, Any],
    ) -> CityDestination: ...


class SqlSeedStore:
    """``SeedStore`` over an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_city(self, name: str) -> City | None:
        """Find a city by case-insensitive name or by its derived slug."""
        stmt = (
            select(City)
            .where(
                or_(
                    func.lower(City.name) == name.lower(),
                    func.lower(City.slug) == city_slug(name),
                )
            )
            .order_by(City.id)
            .limit(1)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def add_city(self, city: City) -> City:
        self.db.add(city)
        await self._commit()
        await self.db.refresh(city)
        return city

    async def find_destination_by_slug(self, slug: str) -> Destination | None:
        stmt = select(Destination).where(Destination.slug == slug)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def is_linked(self, city_id: int, destination_id: int) -> bool:
        stmt = (
            select(CityDestination.id)
            .where(
                CityDestination.city_id == city_id,
                CityDestination.destination_id == destination_id,
            )
            .limit(1)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none() is not None

    async def add_destination(self, destination: Destination) -> Destination:
        self.db.add(destination)
        await self._commit()
        await self.db.refresh(destination)
        return destination

    async def add_photo(self, photo: DestinationPhoto) -> DestinationPhoto:
        self.db.add(photo)
        await self._commit()
        return photo

    async def update_destination_enrichment(
        self,
        destination_id: int,
        *,
        weather_info: dict[str, Any] | None,
        air_quality: dict[str, Any] | None,
        best_visit_time: dict[str, Any],
    ) -> None:
        """Store live conditions; ``None`` snapshots leave the old values.

        Raises:
            LookupError: If no destination has ``destination_id``.
        """
        destination = await self.db.get(Destination, destination_id)
        if destination is None:
            raise LookupError(f"Destination {destination_id} not found")
        if weather_info is not None:
            destination.weather_info = weather_info
        if air_quality is not None:
            destination.air_quality = air_quality
        destination.best_visit_time = best_visit_time
        self.db.add(destination)
        await self._commit()

    async def upsert_city_destination(
        self,
        city_id: int,
        destination_id: int,
        mode: TransportMode,
        values: dict[str, Any],
    ) -> CityDestination:
        """Create or update the link for ``(city, destination, mode)``."""
        stmt = select(CityDestination).where(
            CityDestination.city_id == city_id,
            CityDestination.destination_id == destination_id,
            CityDestination.transport_mode == mode,
        )
        link: CityDestination | None = (
            await self.db.execute(stmt)
        ).scalar_one_or_none()

        if link is None:
            link = CityDestination(
                city_id=city_id,
                destination_id=destination_id,
                transport_mode=mode,
                **values,
            )
            self.db.add(link)
        else:
            for field, value in values.items():
                setattr(link, field, value)

        await self._commit()
        return link

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.warning("Failed to commit seeding write", exc_info=True)
            raise
