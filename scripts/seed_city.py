"""Seed a city from the command line, without going through the admin API.

Usage:
    python scripts/seed_city.py "Pune" --admin-email admin@example.com
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv
from sqlalchemy import select

# Ensure the backend root (parent of this file's directory) is on sys.path
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

load_dotenv(BACKEND_ROOT / ".env")

from app.core.logging import logger  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.activity_log_service import log_activity  # noqa: E402
from app.services.city_seeding import seed_city_nearby  # noqa: E402
from app.services.geo_cache import SqlGeoLookupCache  # noqa: E402
from app.services.google_maps import GoogleMapsService  # noqa: E402
from app.services.seed_store import SqlSeedStore  # noqa: E402
from core.settings import get_settings  # noqa: E402
from db.session import AsyncSessionLocal, engine  # noqa: E402


async def _seed(city_name: str, admin_email: str) -> int:
    settings = get_settings()
    async with AsyncSessionLocal() as session:
        admin = (
            await session.execute(select(User).where(User.email == admin_email))
        ).scalar_one_or_none()
        if admin is None or not admin.admin:
            logger.error("No admin user with email %s", admin_email)
            return 1

        admin_id = admin.id
        maps = GoogleMapsService(
            settings.google_maps_api_key.get_secret_value(),
            SqlGeoLookupCache(session),
            timeout=settings.http_timeout_seconds,
        )
        try:
            result = await seed_city_nearby(
                city_name, admin_id, store=SqlSeedStore(session), maps=maps
            )
        except Exception as exc:
            await session.rollback()
            await log_activity(
                session,
                actor_id=admin_id,
                action="seed_city_failed",
                target_type="city",
                details={"error": str(exc)},
            )
            print(f"Seeding failed: {exc}")
            return 1

        await log_activity(
            session,
            actor_id=admin_id,
            action="seed_city",
            target_type="city",
            target_id=result.city_id,
            details={
                "city_name": result.city_name,
                "destinations_created": result.destinations_created,
            },
        )

    for line in result.logs:
        print(line)
    print(f"{result.destinations_created} destinations created for {result.city_name}")
    return 0


async def _run(city_name: str, admin_email: str) -> int:
    try:
        return await _seed(city_name, admin_email)
    finally:
        await engine.dispose()


def main() -> NoReturn:
    parser = argparse.ArgumentParser(description="Seed nearby destinations for a city.")
    parser.add_argument("city_name")
    parser.add_argument("--admin-email", required=True)
    args = parser.parse_args()
    raise SystemExit(asyncio.run(_run(args.city_name, args.admin_email)))


if __name__ == "__main__":
    main()
