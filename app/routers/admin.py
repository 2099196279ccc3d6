from __future__ import annotations

import time
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.logging import logger
from app.deps import AdminDep, DbDep, GoogleMapsDep, SeedRateLimiterDep, SeedStoreDep
from app.models.activity_log import ActivityLog
from app.schemas.activity_log import ActivityLogListResponse
from app.schemas.seed import SeedCityRequest, SeedCityResponse, SeedRateLimitedResponse
from app.services.activity_log_service import log_activity
from app.services.city_seeding import CityNotFoundError, seed_city_nearby
from app.services.google_maps_errors import GeoConfigurationError, RemoteApiError


router = APIRouter()


@router.get("")
async def admin_status() -> dict[str, str]:
    """Return admin status placeholder."""
    return {"status": "admin-ok"}


@router.get("/activity", response_model=ActivityLogListResponse)
async def list_activity_logs(
    _: AdminDep,
    db: DbDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=50)] = 10,
) -> ActivityLogListResponse:
    """Return a paginated list of recent activity log entries, newest first.

    Args:
        _: Ensures the caller is an admin user.
        db: Async SQLAlchemy session.
        page: 1-based page number.
        page_size: Page size (max 50).

    Returns:
        Paginated :class:`ActivityLogListResponse` with recent entries.
    """

    count_stmt = select(func.count()).select_from(ActivityLog)
    total = int((await db.execute(count_stmt)).scalar_one())

    stmt: Select[tuple[ActivityLog]] = (
        select(ActivityLog)
        .options(selectinload(ActivityLog.actor))
        .order_by(ActivityLog.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    items = list((await db.execute(stmt)).scalars().all())

    return ActivityLogListResponse(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "/seed",
    response_model=SeedCityResponse,
    responses={status.HTTP_429_TOO_MANY_REQUESTS: {"model": SeedRateLimitedResponse}},
)
async def seed_city(
    admin: AdminDep,
    db: DbDep,
    limiter: SeedRateLimiterDep,
    store: SeedStoreDep,
    maps: GoogleMapsDep,
    payload: SeedCityRequest,
    request: Request,
):
    """Discover and link nearby destinations for a city (admin only).

    Throttled per admin. The response carries the full run log; every run,
    successful or not, leaves an activity log entry.
    """

    # Read before seeding: a rollback during the run expires the admin row.
    admin_id, admin_email = admin.id, admin.email

    decision = limiter.check(admin_email)
    if not decision.allowed:
        now = time.time()
        body = SeedRateLimitedResponse(
            error="Rate limit exceeded. Please wait before seeding again.",
            reset_time=decision.reset_at_iso(),
            wait_minutes=decision.wait_minutes(now),
        )
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=body.model_dump(),
            headers={"Retry-After": str(decision.retry_after_seconds(now))},
        )

    try:
        result = await seed_city_nearby(
            payload.city_name, admin_id, store=store, maps=maps
        )
    except Exception as exc:
        logger.error("Error seeding city %s: %s", payload.city_name, exc)
        try:
            await db.rollback()
        except Exception:
            logger.warning("Rollback after failed seeding raised", exc_info=True)
        await _audit(
            db,
            request,
            actor_id=admin_id,
            action="seed_city_failed",
            details={"error": str(exc)},
        )
        raise _seed_error_to_http(exc) from exc

    await _audit(
        db,
        request,
        actor_id=admin_id,
        action="seed_city",
        target_id=result.city_id,
        details={
            "city_name": result.city_name,
            "destinations_created": result.destinations_created,
        },
    )

    return SeedCityResponse(
        message=f"Successfully seeded {result.city_name}",
        city_id=result.city_id,
        city_name=result.city_name,
        destinations_created=result.destinations_created,
        logs=result.logs,
    )


async def _audit(
    db: AsyncSession,
    request: Request,
    *,
    actor_id: int,
    action: str,
    details: dict,
    target_id: int | None = None,
) -> None:
    # Audit failures are logged and never change the seeding outcome.
    try:
        await log_activity(
            db,
            actor_id=actor_id,
            action=action,
            target_type="city",
            target_id=target_id,
            details=details,
            request=request,
        )
    except Exception:
        logger.error("Failed to create audit log for %s", action, exc_info=True)


def _seed_error_to_http(exc: Exception) -> HTTPException:
    if isinstance(exc, CityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, GeoConfigurationError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        )
    if isinstance(exc, RemoteApiError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    if isinstance(exc, IntegrityError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Conflicts with an existing record; retry the request",
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc) or "Failed to seed city",
    )
