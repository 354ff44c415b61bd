"""create telemetry_logs

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "telemetry_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("device_id", sa.String(length=36), nullable=False),
        sa.Column("cwa_type", sa.String(length=50), nullable=False),
        sa.Column("cwa_location", sa.String(length=100), nullable=True),
        sa.Column("cwa_temp", sa.Float(), nullable=True),
        sa.Column("cwa_hum", sa.Float(), nullable=True),
        sa.Column("cwa_daily_high", sa.Float(), nullable=True),
        sa.Column("cwa_daily_low", sa.Float(), nullable=True),
        sa.Column("local_temp", sa.Float(), nullable=True),
        sa.Column("local_hum", sa.Float(), nullable=True),
        sa.Column("local_gps_lat", sa.String(length=20), nullable=True),
        sa.Column("local_gps_long", sa.String(length=20), nullable=True),
        sa.Column("local_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("light", sa.Boolean(), nullable=True),
        sa.Column("status", sa.Boolean(), nullable=True),
        sa.Column(
            "detect",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=True,
        ),
    )
    op.create_index("ix_telemetry_logs_device_id", "telemetry_logs", ["device_id"])
    op.create_index("ix_telemetry_logs_local_time", "telemetry_logs", ["local_time"])


def downgrade() -> None:
    op.drop_index("ix_telemetry_logs_local_time", table_name="telemetry_logs")
    op.drop_index("ix_telemetry_logs_device_id", table_name="telemetry_logs")
    op.drop_table("telemetry_logs")
