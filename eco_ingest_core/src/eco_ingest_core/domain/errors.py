class IngestError(Exception):
    """Base class for per-message ingest failures."""


class PayloadRejected(IngestError):
    """Raised when a data payload is malformed or is not telemetry."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class PersistenceError(IngestError):
    """Raised by a unit of work when the store refuses or loses a write."""
