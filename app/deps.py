from __future__ import annotations

from typing import Annotated, TypeAlias

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.geo_cache import SqlGeoLookupCache
from app.services.google_maps import GoogleMapsService
from app.services.rate_limiter import RateLimiter, get_seed_rate_limiter
from app.services.security import require_admin
from app.services.seed_store import SeedStore, SqlSeedStore
from core.settings import get_settings
from db.session import get_db

DbDep: TypeAlias = Annotated[AsyncSession, Depends(get_db)]
AdminDep: TypeAlias = Annotated[User, Depends(require_admin)]
SeedRateLimiterDep: TypeAlias = Annotated[RateLimiter, Depends(get_seed_rate_limiter)]


def get_google_maps(db: DbDep) -> GoogleMapsService:
    """Google Maps client whose lookup cache shares the request's session."""
    settings = get_settings()
    return GoogleMapsService(
        settings.google_maps_api_key.get_secret_value(),
        SqlGeoLookupCache(db),
        timeout=settings.http_timeout_seconds,
    )


def get_seed_store(db: DbDep) -> SeedStore:
    return SqlSeedStore(db)


GoogleMapsDep: TypeAlias = Annotated[GoogleMapsService, Depends(get_google_maps)]
SeedStoreDep: TypeAlias = Annotated[SeedStore, Depends(get_seed_store)]
