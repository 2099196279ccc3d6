"""initial schema

Revision ID: 20260301_01_initial
Revises:
Create Date: 2026-03-01

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20260301_01_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    transport_mode = postgresql.ENUM("driving", "transit", name="transport_mode")
    transport_mode.create(op.get_bind(), checkfirst=True)
    transport_mode_col = postgresql.ENUM(
        "driving", "transit", name="transport_mode", create_type=False
    )

    # users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column(
            "admin", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # activity_logs
    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("actor_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("target_type", sa.String(length=64), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("batch_id", sa.String(length=64), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        *_timestamps(),
    )
    for column in ("actor_id", "action", "target_type", "target_id", "batch_id"):
        op.create_index(f"ix_activity_logs_{column}", "activity_logs", [column])

    # cities
    op.create_table(
        "cities",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("state", sa.String(length=255), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_cities_slug"),
    )
    op.create_index("ix_cities_name", "cities", ["name"])

    # destinations
    op.create_table(
        "destinations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("short_summary", sa.Text(), nullable=False),
        sa.Column("ai_enhanced_summary", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("weather_info", sa.JSON(), nullable=True),
        sa.Column("air_quality", sa.JSON(), nullable=True),
        sa.Column("best_visit_time", sa.JSON(), nullable=True),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        *_timestamps(),
        sa.UniqueConstraint("slug", name="uq_destinations_slug"),
    )
    op.create_index("ix_destinations_category", "destinations", ["category"])

    # destination_photos
    op.create_table(
        "destination_photos",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "destination_id",
            sa.Integer(),
            sa.ForeignKey("destinations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("photo_url", sa.Text(), nullable=False),
        sa.Column("photo_reference", sa.Text(), nullable=True),
        sa.Column("width", sa.Integer(), nullable=True),
        sa.Column("height", sa.Integer(), nullable=True),
        sa.Column("attribution", sa.Text(), nullable=True),
        sa.Column(
            "is_primary", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_destination_photos_destination_id", "destination_photos", ["destination_id"]
    )

    # city_destinations
    op.create_table(
        "city_destinations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "city_id",
            sa.Integer(),
            sa.ForeignKey("cities.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "destination_id",
            sa.Integer(),
            sa.ForeignKey("destinations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("transport_mode", transport_mode_col, nullable=False),
        sa.Column("distance_km", sa.Integer(), nullable=False),
        sa.Column("travel_time_minutes", sa.Integer(), nullable=False),
        sa.Column("estimated_fuel_cost", sa.Integer(), nullable=True),
        sa.Column("estimated_transport_cost", sa.Integer(), nullable=True),
        sa.Column("route_polyline", sa.Text(), nullable=True),
        sa.Column("major_waypoints", sa.JSON(), nullable=True),
        sa.Column("fare_details", sa.JSON(), nullable=True),
        sa.Column("booking_links", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "city_id",
            "destination_id",
            "transport_mode",
            name="uq_city_destination_mode",
        ),
    )
    op.create_index("ix_city_destinations_city_id", "city_destinations", ["city_id"])
    op.create_index(
        "ix_city_destinations_destination_id", "city_destinations", ["destination_id"]
    )

    # distance_matrix_cache
    op.create_table(
        "distance_matrix_cache",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("origin_lat", sa.Float(), nullable=False),
        sa.Column("origin_lng", sa.Float(), nullable=False),
        sa.Column("destination_lat", sa.Float(), nullable=False),
        sa.Column("destination_lng", sa.Float(), nullable=False),
        sa.Column("transport_mode", transport_mode_col, nullable=False),
        sa.Column("distance_meters", sa.Integer(), nullable=False),
        sa.Column("duration_seconds", sa.Integer(), nullable=False),
        sa.Column("distance_text", sa.String(length=64), nullable=True),
        sa.Column("duration_text", sa.String(length=64), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_distance_matrix_cache_origin_lat", "distance_matrix_cache", ["origin_lat"]
    )
    op.create_index(
        "ix_distance_matrix_cache_destination_lat",
        "distance_matrix_cache",
        ["destination_lat"],
    )

    # places_cache
    op.create_table(
        "places_cache",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("place_id", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("formatted_address", sa.Text(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("user_ratings_total", sa.Integer(), nullable=True),
        sa.Column("types", sa.JSON(), nullable=True),
        sa.Column("opening_hours", sa.JSON(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.String(length=64), nullable=True),
        sa.Column("reviews", sa.JSON(), nullable=True),
        sa.Column("full_response", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("place_id", name="uq_places_cache_place_id"),
    )


def downgrade() -> None:
    op.drop_table("places_cache")
    op.drop_table("distance_matrix_cache")
    op.drop_table("city_destinations")
    op.drop_table("destination_photos")
    op.drop_table("destinations")
    op.drop_table("cities")
    op.drop_table("activity_logs")
    op.drop_table("users")
    postgresql.ENUM(name="transport_mode").drop(op.get_bind(), checkfirst=True)
