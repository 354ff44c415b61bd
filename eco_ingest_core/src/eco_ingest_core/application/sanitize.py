"""
Field-level sanitation of a decoded reading into a storable ``TelemetryLog``.

Every helper is pure and total: a value that cannot be made safe becomes
``None``, it never raises and never takes the rest of the record down with
it.

Numbers are rounded with the built-in ``round(value, 2)``, i.e. half-to-even
on the binary float value.
"""

import math
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Tuple

from eco_ingest_core.domain.models import TelemetryLog, TelemetryReading, WeatherResult

MAX_COORD_LEN = 20
MAX_TEXT_LEN = 100
MAX_WEATHER_LABEL_LEN = 50

DEFAULT_WEATHER_TYPE = "clear/sunny"

# epoch values at or above this magnitude are milliseconds (year 5138 in seconds)
EPOCH_MS_THRESHOLD = 1e11

# a timestamp string made only of digits is an epoch, never a basic-format ISO date
_EPOCH_TEXT = re.compile(r"[+-]?\d+(?:\.\d+)?")


def to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return float(round(number, 2))


def to_text(value: Any, max_len: int = MAX_TEXT_LEN) -> Optional[str]:
    if value is None:
        return None
    return str(value)[:max_len]


def to_flag(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _from_epoch(seconds: float) -> datetime:
    if abs(seconds) >= EPOCH_MS_THRESHOLD:
        seconds /= 1000
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def to_timestamp(value: Any) -> Optional[str]:
    """Normalise a string, epoch number or date into ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime(value.year, value.month, value.day)
        elif isinstance(value, (int, float)):
            parsed = _from_epoch(float(value))
        elif isinstance(value, str):
            text = value.strip()
            if _EPOCH_TEXT.fullmatch(text):
                parsed = _from_epoch(float(text))
            else:
                if text[-1:] in ("Z", "z"):
                    text = text[:-1] + "+00:00"
                parsed = datetime.fromisoformat(text)
        else:
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        iso = parsed.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    except (ValueError, OverflowError, OSError):
        return None
    return iso.replace("+00:00", "Z")


def to_detection(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


def weather_labels(weather: WeatherResult) -> Tuple[str, Optional[str]]:
    """Return ``(cwa_type, cwa_location)`` from an enrichment result."""
    data = weather.data if weather.success and isinstance(weather.data, dict) else {}
    cwa_type = to_text(data.get("weather"), MAX_WEATHER_LABEL_LEN) or DEFAULT_WEATHER_TYPE
    cwa_location = to_text(data.get("location"), MAX_TEXT_LEN)
    return cwa_type, cwa_location


def build_telemetry_log(
    device_id: str, reading: TelemetryReading, weather: WeatherResult
) -> TelemetryLog:
    cwa_type, cwa_location = weather_labels(weather)
    return TelemetryLog(
        device_id=device_id,
        cwa_type=cwa_type,
        cwa_location=cwa_location,
        cwa_temp=to_number(reading.get("cwa_temp")),
        cwa_hum=to_number(reading.get("cwa_hum")),
        cwa_daily_high=to_number(reading.get("cwa_daily_high")),
        cwa_daily_low=to_number(reading.get("cwa_daily_low")),
        local_temp=to_number(reading.get("local_temp")),
        local_hum=to_number(reading.get("local_hum")),
        local_gps_lat=to_text(reading.get("local_gps_lat"), MAX_COORD_LEN),
        local_gps_long=to_text(reading.get("local_gps_long"), MAX_COORD_LEN),
        local_time=to_timestamp(reading.get("timestamp")),
        light=to_flag(reading.get("light")),
        status=to_flag(reading.get("status")),
        detect=to_detection(reading.get("detect")),
    )
