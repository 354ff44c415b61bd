import json
import math

from eco_ingest_core.domain.errors import PayloadRejected
from eco_ingest_core.domain.models import TelemetryReading

MARKER_FIELD = "esp_temp"


def _reject_constant(token: str):
    raise ValueError(f"non-standard JSON constant {token}")


def validate_payload(raw: bytes) -> TelemetryReading:
    try:
        decoded = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError) as exc:
        raise PayloadRejected(f"malformed payload: {exc}") from exc

    if not isinstance(decoded, dict):
        raise PayloadRejected(f"payload is a {type(decoded).__name__}, not an object")

    marker = decoded.get(MARKER_FIELD)
    if (
        isinstance(marker, bool)
        or not isinstance(marker, (int, float))
        or not math.isfinite(marker)
    ):
        raise PayloadRejected(f"not telemetry: {MARKER_FIELD} missing or not numeric")

    return TelemetryReading(esp_temp=marker, fields=decoded)
