from __future__ import annotations

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models import Base, TimestampMixin
from app.models.user import User


class ActivityLog(TimestampMixin, Base):
    """Audit trail entry for admin actions.

    Seeding writes one entry per run: ``seed_city`` on success (target is the
    resolved city) or ``seed_city_failed`` with the error message.

    Args:
        actor_id: Id of the admin that performed the action.
        action: Machine-friendly action label (e.g. ``"seed_city"``).
        target_type: Logical target type of the action (e.g. ``"city"``).
        target_id: Optional primary key of the target entity when applicable.
        details: Optional JSON payload such as
            ``{"city_name": "Pune", "destinations_created": 7}``.
        batch_id: Optional correlation identifier for grouped entries.
        ip_address: Client address from ``X-Forwarded-For`` / ``X-Real-IP``.
        user_agent: Client ``User-Agent`` header.
    """

    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    actor_id: Mapped[int | None] = mapped_column(
        ForeignKey(User.id), nullable=True, index=True
    )
    actor: Mapped[User | None] = relationship(User)

    action: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    target_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    target_id: Mapped[int | None] = mapped_column(nullable=True, index=True)

    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    batch_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
