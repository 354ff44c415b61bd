from typing import Any, Callable, List, Optional, Tuple

from eco_ingest_core.domain.errors import PersistenceError
from eco_ingest_core.domain.models import TelemetryLog, WeatherResult


class FakeTransport:
    """Records every subscribe/unsubscribe/publish call in order."""

    def __init__(self, *, subscribe_ok: bool = True, publish_ok: bool = True):
        self.subscribe_ok = subscribe_ok
        self.publish_ok = publish_ok
        self.calls: List[Tuple[str, str]] = []
        self.published: List[Tuple[str, str]] = []

    def subscribe(self, topic: str) -> bool:
        self.calls.append(("subscribe", topic))
        return self.subscribe_ok

    def unsubscribe(self, topic: str) -> bool:
        self.calls.append(("unsubscribe", topic))
        return True

    def publish(self, topic: str, payload: str) -> bool:
        self.calls.append(("publish", topic))
        self.published.append((topic, payload))
        return self.publish_ok


class FakeWeatherProvider:
    def __init__(self, result: Optional[WeatherResult] = None):
        self.result = result or WeatherResult.failed("no weather configured")
        self.requests: List[Tuple[Any, Any]] = []

    def fetch(self, lat: Any, long: Any) -> WeatherResult:
        self.requests.append((lat, long))
        return self.result


class RecordingRepo:
    def __init__(self, sink: List[TelemetryLog]):
        self._sink = sink

    def insert(self, record: TelemetryLog) -> None:
        self._sink.append(record)


class StubUoW:
    """Unit of work that keeps inserted records in a list.

    With ``fail_with`` set, leaving the block raises ``PersistenceError`` and
    nothing is committed.
    """

    def __init__(self, fail_with: Optional[str] = None):
        self.fail_with = fail_with
        self.committed: List[TelemetryLog] = []
        self._pending: List[TelemetryLog] = []

    def telemetry_repo(self) -> RecordingRepo:
        return RecordingRepo(self._pending)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, *args):
        pending, self._pending = self._pending, []
        if exc_type:
            return
        if self.fail_with:
            raise PersistenceError(self.fail_with)
        self.committed.extend(pending)


class ImmediateTaskQueue:
    """Runs each task synchronously on enqueue."""

    def __init__(self, accept: bool = True):
        self.accept = accept
        self.results: List[Any] = []

    def enqueue(self, task: Callable[[], Any], label: Optional[str] = None) -> bool:
        if not self.accept:
            return False
        self.results.append(task())
        return True
