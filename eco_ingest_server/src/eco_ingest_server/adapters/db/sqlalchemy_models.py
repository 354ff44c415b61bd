__all__ = ["Base", "TelemetryLogORM"]

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from eco_ingest_server.adapters.db.session import Base


class TelemetryLogORM(Base):
    __tablename__ = "telemetry_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    device_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    cwa_type: Mapped[str] = mapped_column(String(50), nullable=False)
    cwa_location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    cwa_temp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    cwa_hum: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    cwa_daily_high: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    cwa_daily_low: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    local_temp: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    local_hum: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # stored as reported, devices do not agree on a coordinate format
    local_gps_lat: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    local_gps_long: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    local_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), index=True, nullable=True
    )
    light: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    status: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    detect: Mapped[Optional[Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )
