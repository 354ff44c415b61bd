from datetime import datetime, timezone

import factory
from eco_ingest_core.domain.models import TelemetryLog


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TelemetryPayloadFactory(factory.DictFactory):
    """Raw data-channel payload as a device publishes it."""

    esp_temp = 21.456
    cwa_temp = 24.3
    cwa_hum = 71.0
    cwa_daily_high = 27.5
    cwa_daily_low = 19.25
    local_temp = 19.999
    local_hum = 64.123
    local_gps_lat = "24.123"
    local_gps_long = "120.456"
    timestamp = factory.LazyFunction(utc_now_iso)
    light = True
    status = True
    detect = factory.LazyFunction(lambda: {"objects": [{"label": "bird", "score": 0.91}]})


class TelemetryLogFactory(factory.Factory):
    class Meta:
        model = TelemetryLog

    device_id = factory.Faker("uuid4")
    cwa_type = "Cloudy"
    cwa_location = "Taipei"
    cwa_temp = 24.3
    cwa_hum = 71.0
    cwa_daily_high = 27.5
    cwa_daily_low = 19.25
    local_temp = 20.0
    local_hum = 64.12
    local_gps_lat = "24.123"
    local_gps_long = "120.456"
    local_time = factory.LazyFunction(utc_now_iso)
    light = True
    status = False
    detect = factory.LazyFunction(lambda: {"objects": []})
