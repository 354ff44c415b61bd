import logging
import threading
from typing import Dict

from eco_ingest_core.application.route_topic import build_topic
from eco_ingest_core.domain.models import Channel
from eco_ingest_core.domain.ports import Transport

log = logging.getLogger(__name__)


def echo_payload(raw: bytes) -> str:
    """Printable echo of an inbound payload with CR/LF escaped."""
    text = raw.decode("utf-8", errors="replace")
    return text.replace("\r", "\\r").replace("\n", "\\n")


class Acknowledger:
    def __init__(
        self,
        transport: Transport,
        *,
        namespace: str,
        payload: str = "ok",
        echo: bool = False,
    ):
        self._transport = transport
        self._namespace = namespace
        self._payload = payload
        self._echo = echo
        self._last_sent: Dict[str, str] = {}
        self._lock = threading.Lock()

    def acknowledge(self, device_id: str, raw: bytes) -> bool:
        """Publish the confirmation to the device's ``server_response`` topic."""
        topic = build_topic(self._namespace, device_id, Channel.SERVER_RESPONSE)
        body = echo_payload(raw) if self._echo else self._payload
        ok = self._transport.publish(topic, body)
        if not ok:
            log.warning("Ack to %s was not accepted by the transport", topic)
            return ok
        with self._lock:
            self._last_sent[device_id] = body
        return ok

    def is_own_ack(self, device_id: str, raw: bytes) -> bool:
        """True when ``raw`` is the last ack this service published to the device."""
        with self._lock:
            sent = self._last_sent.get(device_id)
        return sent is not None and raw.decode("utf-8", errors="replace") == sent
