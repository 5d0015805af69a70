"""Initial car-sharing schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _json() -> sa.types.TypeEngine:
    return postgresql.JSONB(astext_type=sa.Text()).with_variant(sa.JSON(), "sqlite")


def upgrade() -> None:
    user_role_enum = sa.Enum("USER", "OWNER", "ADMIN", name="userrole")
    user_status_enum = sa.Enum("ACTIVE", "SUSPENDED", name="userstatus")
    license_status_enum = sa.Enum(
        "NONE", "PENDING", "VERIFIED", "REJECTED", name="licensestatus"
    )
    booking_status_enum = sa.Enum(
        "CONFIRMED", "COMPLETED", "CANCELLED", name="bookingstatus"
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255)),
        sa.Column("name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("phone_number", sa.String(length=32)),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("status", user_status_enum, nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("license_status", license_status_enum, nullable=False),
        sa.Column("license_number", sa.String(length=64)),
        sa.Column("license_rejection_reason", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "vehicles",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column(
            "owner_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("brand", sa.String(length=120), nullable=False),
        sa.Column("model", sa.String(length=120), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("seats", sa.Integer(), nullable=False),
        sa.Column("powertrain", sa.String(length=64), nullable=False, server_default="ICE"),
        sa.Column("range_km", sa.Integer()),
        sa.Column("daily_rate", sa.Integer(), nullable=False),
        sa.Column("hourly_rate", sa.Integer(), nullable=False),
        sa.Column("per_km_rate", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("deposit_amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rate_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("pickup_points", _json(), nullable=False),
        sa.Column("rules", _json(), nullable=False),
        sa.Column("photos", _json(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "vehicle_id",
            sa.String(length=64),
            sa.ForeignKey("vehicles.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("pickup_point", sa.String(length=255), nullable=False),
        sa.Column("duration_hours", sa.Numeric(10, 2), nullable=False),
        sa.Column("distance_km", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_intent_id", sa.String(length=255), nullable=False),
        sa.Column("status", booking_status_enum, nullable=False),
        sa.Column("charges", _json(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("payment_intent_id", name="uq_bookings_payment_intent_id"),
    )
    op.create_index("ix_bookings_user_created", "bookings", ["user_id", "created_at"])
    op.create_index("ix_bookings_vehicle_id", "bookings", ["vehicle_id"])


def downgrade() -> None:
    op.drop_index("ix_bookings_vehicle_id", table_name="bookings")
    op.drop_index("ix_bookings_user_created", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("vehicles")
    op.drop_table("users")
    bind = op.get_bind()
    for name in ("bookingstatus", "licensestatus", "userstatus", "userrole"):
        sa.Enum(name=name).drop(bind, checkfirst=True)
