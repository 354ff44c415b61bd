import logging
import re
from typing import Optional

from eco_ingest_core.domain.models import Channel, TopicRoute

log = logging.getLogger(__name__)

# RFC 4122: version nibble 1-5, variant nibble 8, 9, a or b
DEVICE_ID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def parse_topic(topic: str, namespace: str) -> Optional[TopicRoute]:
    """Split ``<namespace>/<deviceId>/<channel>`` into a route, or ``None``."""
    parts = topic.split("/")
    if len(parts) != 3 or parts[0] != namespace:
        log.warning("Dropping message on unexpected topic %r", topic)
        return None

    _, device_id, channel = parts
    if not DEVICE_ID_RE.match(device_id):
        log.warning("Dropping message with invalid device id on topic %r", topic)
        return None

    try:
        return TopicRoute(device_id=device_id, channel=Channel(channel))
    except ValueError:
        log.debug("Ignoring unknown channel %r for device %s", channel, device_id)
        return None


def build_topic(namespace: str, device_id: str, channel: Channel) -> str:
    return f"{namespace}/{device_id}/{channel.value}"


def wildcard_topic(namespace: str, channel: Channel) -> str:
    return f"{namespace}/+/{channel.value}"
