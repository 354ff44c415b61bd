"""
Per-device subscription state.

A device starts out Handshaking: it is only heard through the broker-wide
``status`` / ``server_response`` wildcards. The first handshake message moves
it to Streaming, where the service holds exactly one per-device subscription,
its ``data`` topic. The transition is re-applied on every handshake message
and always lands in the same state.
"""

import logging
import threading
from typing import Dict, FrozenSet, List

from eco_ingest_core.application.route_topic import build_topic
from eco_ingest_core.domain.models import Channel, SubscriptionState
from eco_ingest_core.domain.ports import SubscriptionStore, Transport

log = logging.getLogger(__name__)

HANDSHAKE_CHANNELS: FrozenSet[Channel] = frozenset({Channel.STATUS, Channel.SERVER_RESPONSE})
STREAMING_CHANNELS: FrozenSet[Channel] = frozenset({Channel.DATA})


class InMemorySubscriptionStore(SubscriptionStore):
    def __init__(self):
        self._channels: Dict[str, FrozenSet[Channel]] = {}
        self._lock = threading.Lock()

    def channels_for(self, device_id: str) -> FrozenSet[Channel]:
        with self._lock:
            return self._channels.get(device_id, HANDSHAKE_CHANNELS)

    def set_channels(self, device_id: str, channels: FrozenSet[Channel]) -> None:
        with self._lock:
            self._channels[device_id] = frozenset(channels)

    def streaming_devices(self) -> List[str]:
        with self._lock:
            return sorted(d for d, ch in self._channels.items() if ch == STREAMING_CHANNELS)


def state_of(device_id: str, store: SubscriptionStore) -> SubscriptionState:
    if store.channels_for(device_id) == STREAMING_CHANNELS:
        return SubscriptionState.STREAMING
    return SubscriptionState.HANDSHAKING


def enter_streaming(
    device_id: str,
    *,
    namespace: str,
    store: SubscriptionStore,
    transport: Transport,
) -> FrozenSet[Channel]:
    """Drop every per-device subscription, then subscribe to ``data`` only."""
    previous = state_of(device_id, store)

    for channel in Channel:
        transport.unsubscribe(build_topic(namespace, device_id, channel))

    data_topic = build_topic(namespace, device_id, Channel.DATA)
    if not transport.subscribe(data_topic):
        log.error(
            "Could not subscribe to %s; device %s stays unserved until the broker recovers",
            data_topic,
            device_id,
        )

    store.set_channels(device_id, STREAMING_CHANNELS)
    if previous is SubscriptionState.HANDSHAKING:
        log.info("Device %s handshake complete, streaming on %s", device_id, data_topic)
    else:
        log.debug("Device %s re-sent handshake, subscription re-issued", device_id)
    return STREAMING_CHANNELS


def restore_streaming(*, namespace: str, store: SubscriptionStore, transport: Transport) -> int:
    """Re-subscribe the data topic of every streaming device after a reconnect."""
    restored = 0
    for device_id in store.streaming_devices():
        if transport.subscribe(build_topic(namespace, device_id, Channel.DATA)):
            restored += 1
    return restored
