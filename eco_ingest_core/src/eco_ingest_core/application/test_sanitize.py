import math
from datetime import date, datetime, timedelta, timezone

import pytest

from eco_ingest_core.application.sanitize import (
    DEFAULT_WEATHER_TYPE,
    build_telemetry_log,
    to_detection,
    to_flag,
    to_number,
    to_text,
    to_timestamp,
    weather_labels,
)
from eco_ingest_core.domain.models import TelemetryReading, WeatherResult

DEVICE = "3f2b8c1e-9a4d-4c7e-8b21-5d6f7a8b9c0d"


# ───────── numbers ─────────
@pytest.mark.parametrize(
    "value, expected",
    [(19.999, 20.0), (21.456, 21.46), (5, 5.0), (-3.14159, -3.14), (0, 0.0), (1e20, 1e20)],
)
def test_finite_numbers_are_rounded(value, expected):
    assert to_number(value) == expected
    assert to_number(value) == round(value, 2)


@pytest.mark.parametrize(
    "value",
    [math.nan, math.inf, -math.inf, "21.4", None, True, False, [1], {"v": 1}, 10**400],
)
def test_non_finite_or_non_numeric_is_null(value):
    assert to_number(value) is None


# ───────── text ─────────
def test_text_is_truncated():
    assert to_text("x" * 150) == "x" * 100
    assert to_text("24.1234567890123456789012", 20) == "24.12345678901234567"


def test_text_coerces_non_strings():
    assert to_text(24.123, 20) == "24.123"


def test_null_text_stays_null():
    assert to_text(None) is None
    assert to_text(None, 20) is None


# ───────── flags ─────────
@pytest.mark.parametrize("value", [True, False])
def test_strict_booleans_pass(value):
    assert to_flag(value) is value


@pytest.mark.parametrize("value", ["true", "false", 1, 0, None, [], "yes"])
def test_non_boolean_flags_are_null(value):
    assert to_flag(value) is None


# ───────── timestamps ─────────
def test_epoch_seconds_and_iso_string_agree():
    epoch = 1_700_000_000
    iso = "2023-11-14T22:13:20Z"
    assert to_timestamp(epoch) == to_timestamp(iso) == "2023-11-14T22:13:20.000Z"


def test_epoch_milliseconds_are_detected():
    assert to_timestamp(1_700_000_000_123) == "2023-11-14T22:13:20.123Z"


def test_stringified_epochs_match_numeric_ones():
    assert to_timestamp("1700000000") == to_timestamp(1_700_000_000)
    assert to_timestamp(" 1700000000123 ") == "2023-11-14T22:13:20.123Z"
    assert to_timestamp("1700000000.5") == "2023-11-14T22:13:20.500Z"


def test_digit_only_string_is_never_a_basic_iso_date():
    assert to_timestamp("20231114") == "1970-08-23T03:45:14.000Z"


def test_offsets_are_normalised_to_utc():
    assert to_timestamp("2023-11-15T06:13:20+08:00") == "2023-11-14T22:13:20.000Z"


def test_naive_values_are_taken_as_utc():
    assert to_timestamp("2023-11-14T22:13:20") == "2023-11-14T22:13:20.000Z"
    assert to_timestamp(datetime(2023, 11, 14, 22, 13, 20)) == "2023-11-14T22:13:20.000Z"


def test_aware_datetime_and_date():
    tz = timezone(timedelta(hours=8))
    assert to_timestamp(datetime(2023, 11, 15, 6, 13, 20, tzinfo=tz)) == "2023-11-14T22:13:20.000Z"
    assert to_timestamp(date(2023, 11, 14)) == "2023-11-14T00:00:00.000Z"


@pytest.mark.parametrize(
    "value",
    ["not a date", "", "2023-13-40", "9" * 400, "12abc", math.nan, math.inf, 1e300, True, None, [], {"ts": 1}],
)
def test_unparseable_timestamps_are_null(value):
    assert to_timestamp(value) is None


# ───────── detection payload ─────────
def test_detection_object_passes_verbatim():
    detect = {"birds": [{"label": "sparrow", "score": 0.9}]}
    assert to_detection(detect) is detect


@pytest.mark.parametrize("value", [[{"label": "x"}], "birds", 3, None, True])
def test_non_object_detection_is_null(value):
    assert to_detection(value) is None


# ───────── weather ─────────
def test_weather_labels_from_successful_enrichment():
    result = WeatherResult(success=True, data={"weather": "Cloudy", "location": "Taipei"})
    assert weather_labels(result) == ("Cloudy", "Taipei")


def test_weather_labels_default_on_failure():
    assert weather_labels(WeatherResult.failed("timeout")) == (DEFAULT_WEATHER_TYPE, None)
    assert DEFAULT_WEATHER_TYPE == "clear/sunny"


def test_weather_labels_default_when_label_missing_and_truncate():
    result = WeatherResult(success=True, data={"location": "L" * 120})
    cwa_type, cwa_location = weather_labels(result)
    assert cwa_type == DEFAULT_WEATHER_TYPE
    assert cwa_location == "L" * 100

    long_label = WeatherResult(success=True, data={"weather": "W" * 80})
    assert weather_labels(long_label)[0] == "W" * 50


# ───────── whole record ─────────
def test_build_telemetry_log_degrades_field_by_field():
    reading = TelemetryReading(
        esp_temp=21.5,
        fields={
            "esp_temp": 21.5,
            "cwa_temp": "hot",
            "cwa_hum": 65.556,
            "local_temp": 19.999,
            "local_hum": None,
            "local_gps_lat": 24.123,
            "local_gps_long": "120.456",
            "timestamp": "garbage",
            "light": "true",
            "status": False,
            "detect": [1, 2],
        },
    )

    record = build_telemetry_log(DEVICE, reading, WeatherResult.failed("down"))

    assert record.device_id == DEVICE
    assert record.cwa_type == DEFAULT_WEATHER_TYPE
    assert record.cwa_location is None
    assert record.cwa_temp is None
    assert record.cwa_hum == 65.56
    assert record.cwa_daily_high is None
    assert record.local_temp == 20.0
    assert record.local_hum is None
    assert record.local_gps_lat == "24.123"
    assert record.local_gps_long == "120.456"
    assert record.local_time is None
    assert record.light is None
    assert record.status is False
    assert record.detect is None
