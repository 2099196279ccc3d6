"""Persistent memoization for paid Google lookups.

Two caches sit in front of :class:`~app.services.google_maps.GoogleMapsService`:
single-pair distance matrix results and place details payloads. Both are
append-only; entries are never invalidated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import logger
from app.models.city_destination import TransportMode
from app.models.geo_cache import DistanceMatrixCache, PlacesCache
from app.schemas.geo import Coordinates


@dataclass(frozen=True)
class CachedDistance:
    distance_meters: int
    duration_seconds: int
    distance_text: str | None = None
    duration_text: str | None = None


class GeoLookupCache(Protocol):
    async def get_distance(
        self, origin: Coordinates, destination: Coordinates, mode: TransportMode
    ) -> CachedDistance | None: ...

    async def put_distance(
        self,
        origin: Coordinates,
        destination: Coordinates,
        mode: TransportMode,
        entry: CachedDistance,
    ) -> None: ...

    async def get_place_details(self, place_id: str) -> dict[str, Any] | None: ...

    async def put_place_details(self, place_id: str, payload: dict[str, Any]) -> None: ...


class SqlGeoLookupCache:
    """``GeoLookupCache`` backed by the ``distance_matrix_cache`` and
    ``places_cache`` tables."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_distance(
        self, origin: Coordinates, destination: Coordinates, mode: TransportMode
    ) -> CachedDistance | None:
        stmt = (
            select(DistanceMatrixCache)
            .where(
                DistanceMatrixCache.origin_lat == origin.lat,
                DistanceMatrixCache.origin_lng == origin.lng,
                DistanceMatrixCache.destination_lat == destination.lat,
                DistanceMatrixCache.destination_lng == destination.lng,
                DistanceMatrixCache.transport_mode == mode,
            )
            .limit(1)
        )
        row: DistanceMatrixCache | None = (
            await self.db.execute(stmt)
        ).scalar_one_or_none()
        if row is None:
            return None
        return CachedDistance(
            distance_meters=row.distance_meters,
            duration_seconds=row.duration_seconds,
            distance_text=row.distance_text,
            duration_text=row.duration_text,
        )

    async def put_distance(
        self,
        origin: Coordinates,
        destination: Coordinates,
        mode: TransportMode,
        entry: CachedDistance,
    ) -> None:
        self.db.add(
            DistanceMatrixCache(
                origin_lat=origin.lat,
                origin_lng=origin.lng,
                destination_lat=destination.lat,
                destination_lng=destination.lng,
                transport_mode=mode,
                distance_meters=entry.distance_meters,
                duration_seconds=entry.duration_seconds,
                distance_text=entry.distance_text,
                duration_text=entry.duration_text,
            )
        )
        await self._commit()

    async def get_place_details(self, place_id: str) -> dict[str, Any] | None:
        stmt = select(PlacesCache).where(PlacesCache.place_id == place_id)
        row: PlacesCache | None = (await self.db.execute(stmt)).scalar_one_or_none()
        return row.full_response if row is not None else None

    async def put_place_details(self, place_id: str, payload: dict[str, Any]) -> None:
        self.db.add(
            PlacesCache(
                place_id=place_id,
                name=payload.get("name"),
                formatted_address=payload.get("formatted_address"),
                rating=payload.get("rating"),
                user_ratings_total=payload.get("user_ratings_total"),
                types=payload.get("types"),
                opening_hours=payload.get("opening_hours"),
                website=payload.get("website"),
                phone_number=payload.get("formatted_phone_number"),
                reviews=payload.get("reviews"),
                full_response=payload,
            )
        )
        await self._commit()

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.warning("Failed to commit geo lookup cache entry", exc_info=True)
            raise
