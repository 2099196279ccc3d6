from __future__ import annotations

"""Service helpers for creating audit trail entries.

Routers call :func:`log_activity` instead of constructing ``ActivityLog``
rows directly. Client address and user agent are taken from the request when
one is supplied.
"""

from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import logger
from app.models.activity_log import ActivityLog


def client_ip(request: Request | None) -> str | None:
    """Best-effort client address: first ``X-Forwarded-For`` hop, then ``X-Real-IP``."""
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip")


async def log_activity(
    db: AsyncSession,
    *,
    actor_id: int | None,
    action: str,
    target_type: str,
    target_id: int | None = None,
    details: dict[str, Any] | None = None,
    batch_id: str | None = None,
    request: Request | None = None,
    commit: bool = True,
) -> ActivityLog:
    """Create and persist a single ``ActivityLog`` entry.

    Args:
        db: Async SQLAlchemy session.
        actor_id: Optional user id that performed the action.
        action: Machine-readable action label (e.g. ``"seed_city"``).
        target_type: Logical target type (e.g. ``"city"``).
        target_id: Optional primary key of the affected entity.
        details: Optional JSON-serializable dict with extra context.
        batch_id: Optional correlation id for grouping related entries.
        request: Incoming request, for client address and user agent.
        commit: Whether to commit the session after inserting the log.

    Returns:
        The persisted ``ActivityLog`` instance.
    """

    entry = ActivityLog(
        actor_id=actor_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details or None,
        batch_id=batch_id,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent") if request is not None else None,
    )
    db.add(entry)

    if commit:
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            logger.warning("Failed to commit activity log entry", exc_info=True)
            raise

    return entry
