from datetime import datetime
from typing import Optional

from eco_ingest_core.domain.models import TelemetryLog
from eco_ingest_core.domain.ports import TelemetryLogRepository
from sqlalchemy.orm import Session

from eco_ingest_server.adapters.db.sqlalchemy_models import TelemetryLogORM


class PostgresTelemetryLogRepository(TelemetryLogRepository):
    """Insert-only: rows are never read back, updated or deleted here."""

    def __init__(self, session: Session):
        self.session = session

    def insert(self, record: TelemetryLog) -> None:
        row = TelemetryLogORM()  # no keyword args
        row.device_id = record.device_id
        row.cwa_type = record.cwa_type
        row.cwa_location = record.cwa_location
        row.cwa_temp = record.cwa_temp
        row.cwa_hum = record.cwa_hum
        row.cwa_daily_high = record.cwa_daily_high
        row.cwa_daily_low = record.cwa_daily_low
        row.local_temp = record.local_temp
        row.local_hum = record.local_hum
        row.local_gps_lat = record.local_gps_lat
        row.local_gps_long = record.local_gps_long
        row.local_time = self._parse_time(record.local_time)
        row.light = record.light
        row.status = record.status
        row.detect = record.detect
        self.session.add(row)

    # helper
    @staticmethod
    def _parse_time(value: Optional[str]) -> Optional[datetime]:
        if value is None:
            return None
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
