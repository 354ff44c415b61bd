import logging
from typing import Callable

from eco_ingest_core.application.acknowledge import Acknowledger
from eco_ingest_core.application.ingest_reading import ingest_reading
from eco_ingest_core.application.sanitize import build_telemetry_log
from eco_ingest_core.application.validate_payload import validate_payload
from eco_ingest_core.domain.errors import PayloadRejected, PersistenceError
from eco_ingest_core.domain.models import IngestOutcome, IngestStatus
from eco_ingest_core.domain.ports import UnitOfWork, WeatherProvider

log = logging.getLogger(__name__)


class IngestPipeline:
    """Validate, enrich, sanitize, persist and acknowledge one data message.

    Every failure is contained in the returned ``IngestOutcome``; only a
    persisted record is acknowledged.
    """

    def __init__(
        self,
        *,
        weather: WeatherProvider,
        uow_factory: Callable[[], UnitOfWork],
        acknowledger: Acknowledger,
    ):
        self._weather = weather
        self._uow_factory = uow_factory
        self._acknowledger = acknowledger

    def process(self, device_id: str, raw: bytes) -> IngestOutcome:
        try:
            reading = validate_payload(raw)
        except PayloadRejected as exc:
            log.warning("Rejected payload from %s: %s", device_id, exc.reason)
            return IngestOutcome(device_id, IngestStatus.REJECTED, reason=exc.reason)

        weather = self._weather.fetch(reading.get("local_gps_lat"), reading.get("local_gps_long"))
        if not weather.success:
            log.warning("No weather for %s, using defaults: %s", device_id, weather.msg)

        record = build_telemetry_log(device_id, reading, weather)

        try:
            ingest_reading(record, self._uow_factory())
        except PersistenceError as exc:
            log.error("Failed to persist reading from %s: %s", device_id, exc, exc_info=True)
            return IngestOutcome(
                device_id, IngestStatus.PERSIST_FAILED, reason=str(exc), record=record
            )
        log.debug("Persisted reading from %s", device_id)

        if not self._acknowledger.acknowledge(device_id, raw):
            return IngestOutcome(
                device_id, IngestStatus.ACK_FAILED, reason="ack not published", record=record
            )
        return IngestOutcome(device_id, IngestStatus.ACKED, record=record)
