from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class Channel(str, Enum):
    STATUS = "status"
    DATA = "data"
    SERVER_RESPONSE = "server_response"


class SubscriptionState(str, Enum):
    HANDSHAKING = "handshaking"  # status + server_response
    STREAMING = "streaming"  # data only


@dataclass(frozen=True)
class TopicRoute:
    device_id: str
    channel: Channel


@dataclass(frozen=True)
class TelemetryReading:
    """Decoded payload of a data message. Read-only once built."""

    esp_temp: float
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)


@dataclass(frozen=True)
class WeatherResult:
    success: bool
    data: Optional[Dict[str, Any]] = None
    msg: str = ""

    @classmethod
    def failed(cls, msg: str) -> "WeatherResult":
        return cls(success=False, data=None, msg=msg)


@dataclass
class TelemetryLog:
    device_id: str
    cwa_type: str
    cwa_location: Optional[str] = None
    cwa_temp: Optional[float] = None
    cwa_hum: Optional[float] = None
    cwa_daily_high: Optional[float] = None
    cwa_daily_low: Optional[float] = None
    local_temp: Optional[float] = None
    local_hum: Optional[float] = None
    local_gps_lat: Optional[str] = None
    local_gps_long: Optional[str] = None
    local_time: Optional[str] = None  # ISO-8601, UTC
    light: Optional[bool] = None
    status: Optional[bool] = None
    detect: Optional[Dict[str, Any]] = None


class IngestStatus(str, Enum):
    ACKED = "acked"
    REJECTED = "rejected"
    PERSIST_FAILED = "persist_failed"
    ACK_FAILED = "ack_failed"


@dataclass
class IngestOutcome:
    device_id: str
    status: IngestStatus
    reason: Optional[str] = None
    record: Optional[TelemetryLog] = None

    @property
    def persisted(self) -> bool:
        return self.status in (IngestStatus.ACKED, IngestStatus.ACK_FAILED)
