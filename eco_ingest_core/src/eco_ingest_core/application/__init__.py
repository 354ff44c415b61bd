from .acknowledge import Acknowledger
from .dispatch import MessageDispatcher
from .ingest_reading import ingest_reading
from .pipeline import IngestPipeline
from .route_topic import build_topic, parse_topic
from .sanitize import build_telemetry_log
from .subscriptions import InMemorySubscriptionStore, enter_streaming, restore_streaming
from .validate_payload import validate_payload

__all__ = [
    "Acknowledger",
    "MessageDispatcher",
    "ingest_reading",
    "IngestPipeline",
    "build_topic",
    "parse_topic",
    "build_telemetry_log",
    "InMemorySubscriptionStore",
    "enter_streaming",
    "restore_streaming",
    "validate_payload",
]
