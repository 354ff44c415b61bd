from eco_ingest_core.domain.models import TelemetryLog
from eco_ingest_core.domain.ports import UnitOfWork


def ingest_reading(record: TelemetryLog, uow: UnitOfWork) -> None:
    with uow:
        uow.telemetry_repo().insert(record)
