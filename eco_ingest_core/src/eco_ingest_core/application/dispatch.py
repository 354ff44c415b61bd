import logging
from typing import Optional

from eco_ingest_core.application.acknowledge import Acknowledger
from eco_ingest_core.application.pipeline import IngestPipeline
from eco_ingest_core.application.route_topic import parse_topic
from eco_ingest_core.application.subscriptions import (
    HANDSHAKE_CHANNELS,
    enter_streaming,
    state_of,
)
from eco_ingest_core.domain.models import Channel, SubscriptionState
from eco_ingest_core.domain.ports import SubscriptionStore, TaskQueue, Transport

log = logging.getLogger(__name__)


class MessageDispatcher:
    """Entry point for every inbound message.

    Handshake messages are handled inline; data messages are queued for the
    pipeline so the transport callback returns immediately. Our own acks
    come back through the ``server_response`` wildcard and are skipped for
    devices that are already streaming.
    """

    def __init__(
        self,
        *,
        namespace: str,
        store: SubscriptionStore,
        transport: Transport,
        pipeline: IngestPipeline,
        tasks: TaskQueue,
        acknowledger: Optional[Acknowledger] = None,
    ):
        self.namespace = namespace
        self.store = store
        self.transport = transport
        self.pipeline = pipeline
        self.tasks = tasks
        self.acknowledger = acknowledger

    def dispatch(self, topic: str, payload: bytes) -> None:
        route = parse_topic(topic, self.namespace)
        if route is None:
            return

        if route.channel in HANDSHAKE_CHANNELS:
            if self._is_looped_back_ack(route.device_id, route.channel, payload):
                log.debug("Ignoring our own ack echoed back for %s", route.device_id)
                return
            enter_streaming(
                route.device_id,
                namespace=self.namespace,
                store=self.store,
                transport=self.transport,
            )
            return

        device_id = route.device_id
        queued = self.tasks.enqueue(
            lambda: self.pipeline.process(device_id, payload), label=device_id
        )
        if not queued:
            log.warning("Worker queue full, dropped data message from %s", device_id)

    def _is_looped_back_ack(self, device_id: str, channel: Channel, payload: bytes) -> bool:
        return (
            self.acknowledger is not None
            and channel is Channel.SERVER_RESPONSE
            and state_of(device_id, self.store) is SubscriptionState.STREAMING
            and self.acknowledger.is_own_ack(device_id, payload)
        )
