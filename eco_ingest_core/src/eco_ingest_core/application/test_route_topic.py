import pytest

from eco_ingest_core.application.route_topic import build_topic, parse_topic
from eco_ingest_core.domain.models import Channel, TopicRoute

NS = "eco_clients"
DEVICE = "3f2b8c1e-9a4d-4c7e-8b21-5d6f7a8b9c0d"


@pytest.mark.parametrize("channel", list(Channel))
def test_parse_valid_topic(channel):
    route = parse_topic(f"{NS}/{DEVICE}/{channel.value}", NS)
    assert route == TopicRoute(device_id=DEVICE, channel=channel)


def test_uppercase_uuid_is_accepted():
    assert parse_topic(f"{NS}/{DEVICE.upper()}/data", NS) is not None


@pytest.mark.parametrize(
    "device_id",
    [
        "not-a-uuid",
        "3f2b8c1e9a4d4c7e8b215d6f7a8b9c0d",  # no dashes
        "3f2b8c1e-9a4d-0c7e-8b21-5d6f7a8b9c0d",  # version 0
        "3f2b8c1e-9a4d-4c7e-7b21-5d6f7a8b9c0d",  # bad variant
        "3f2b8c1e-9a4d-4c7e-8b21-5d6f7a8b9c0dz",
        "",
    ],
)
def test_invalid_device_id_is_dropped(device_id):
    assert parse_topic(f"{NS}/{device_id}/data", NS) is None


@pytest.mark.parametrize(
    "topic",
    [
        f"{NS}/{DEVICE}/telemetry",
        f"{NS}/{DEVICE}",
        f"{NS}/{DEVICE}/data/extra",
        f"other/{DEVICE}/data",
        f"/{DEVICE}/data",
        "",
    ],
)
def test_malformed_topics_are_dropped(topic):
    assert parse_topic(topic, NS) is None


def test_build_topic_inverts_parse():
    topic = build_topic(NS, DEVICE, Channel.SERVER_RESPONSE)
    assert topic == f"{NS}/{DEVICE}/server_response"
    assert parse_topic(topic, NS) == TopicRoute(DEVICE, Channel.SERVER_RESPONSE)
