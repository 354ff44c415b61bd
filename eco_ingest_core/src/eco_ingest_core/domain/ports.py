from typing import Any, Callable, FrozenSet, List, Optional, Protocol

from eco_ingest_core.domain.models import Channel, TelemetryLog, WeatherResult


class TelemetryLogRepository(Protocol):
    def insert(self, record: TelemetryLog) -> None: ...


class UnitOfWork(Protocol):
    def telemetry_repo(self) -> TelemetryLogRepository: ...

    def __enter__(self) -> "UnitOfWork": ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None: ...


class WeatherProvider(Protocol):
    def fetch(self, lat: Any, long: Any) -> WeatherResult: ...


class Transport(Protocol):
    def subscribe(self, topic: str) -> bool: ...

    def unsubscribe(self, topic: str) -> bool: ...

    def publish(self, topic: str, payload: str) -> bool: ...


class SubscriptionStore(Protocol):
    def channels_for(self, device_id: str) -> FrozenSet[Channel]: ...

    def set_channels(self, device_id: str, channels: FrozenSet[Channel]) -> None: ...

    def streaming_devices(self) -> List[str]: ...


class TaskQueue(Protocol):
    def enqueue(self, task: Callable[[], Any], label: Optional[str] = None) -> bool: ...
