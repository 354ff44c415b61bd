import logging
import secrets
import string
from typing import Callable, Optional

import paho.mqtt.client as mqtt
from eco_ingest_core.application import (
    Acknowledger,
    IngestPipeline,
    InMemorySubscriptionStore,
    MessageDispatcher,
    restore_streaming,
)
from eco_ingest_core.application.route_topic import wildcard_topic
from eco_ingest_core.application.subscriptions import HANDSHAKE_CHANNELS
from eco_ingest_core.config.environments import Settings, get_settings
from eco_ingest_core.domain.ports import SubscriptionStore, UnitOfWork, WeatherProvider

from eco_ingest_server.adapters.mqtt.worker_pool import BoundedWorkerPool

log = logging.getLogger(__name__)

CLIENT_SUFFIX_ALPHABET = string.ascii_letters + string.digits


def random_suffix(length: int = 8) -> str:
    return "".join(secrets.choice(CLIENT_SUFFIX_ALPHABET) for _ in range(length))


def create_client(settings: Settings) -> mqtt.Client:
    client_id = f"{settings.MQTT_CLIENT_ID}_{random_suffix()}"
    client = mqtt.Client(
        mqtt.CallbackAPIVersion.VERSION2,
        client_id=client_id,
        clean_session=True,
        protocol=mqtt.MQTTv311,
    )
    if settings.MQTT_USERNAME:
        client.username_pw_set(settings.MQTT_USERNAME, settings.MQTT_PASSWORD)
    client.reconnect_delay_set(min_delay=1, max_delay=30)
    log.info("MQTT client id: %s", client_id)
    return client


class PahoTransport:
    """Transport port over a paho client. Calls never raise; failures return False."""

    def __init__(self, client: mqtt.Client, qos: int = 0):
        self._client = client
        self._qos = qos

    def subscribe(self, topic: str) -> bool:
        result, _mid = self._client.subscribe(topic, qos=self._qos)
        if result != mqtt.MQTT_ERR_SUCCESS:
            log.error("Subscribe to %s failed, rc=%s", topic, result)
            return False
        log.debug("Subscribed to %s", topic)
        return True

    def unsubscribe(self, topic: str) -> bool:
        result, _mid = self._client.unsubscribe(topic)
        if result != mqtt.MQTT_ERR_SUCCESS:
            log.error("Unsubscribe from %s failed, rc=%s", topic, result)
            return False
        return True

    def publish(self, topic: str, payload: str) -> bool:
        info = self._client.publish(topic, payload, qos=self._qos)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            log.error("Publish to %s failed, rc=%s", topic, info.rc)
            return False
        return True


class MqttIngestServer:
    def __init__(
        self,
        settings: Settings,
        *,
        client: Optional[mqtt.Client] = None,
        store: Optional[SubscriptionStore] = None,
        pool: Optional[BoundedWorkerPool] = None,
        weather: Optional[WeatherProvider] = None,
        uow_factory: Optional[Callable[[], UnitOfWork]] = None,
    ):
        self.settings = settings
        self.namespace = settings.MQTT_NAMESPACE
        self.client = client or create_client(settings)
        self.transport = PahoTransport(self.client)
        self.store = store or InMemorySubscriptionStore()
        self.pool = pool or BoundedWorkerPool(
            max_queue_size=settings.WORKER_QUEUE_SIZE, num_workers=settings.WORKER_COUNT
        )

        if weather is None:
            from eco_ingest_server.adapters.weather.cwa_client import CwaWeatherClient

            weather = CwaWeatherClient(
                settings.CWA_API_SERVICE, timeout=settings.WEATHER_TIMEOUT_SEC
            )
        if uow_factory is None:
            from eco_ingest_server.adapters.db.session import create_session_factory
            from eco_ingest_server.adapters.db.uow import SqlAlchemyUoW

            session_factory = create_session_factory(settings)
            uow_factory = lambda: SqlAlchemyUoW(session_factory=session_factory)  # noqa: E731

        acknowledger = Acknowledger(
            self.transport,
            namespace=self.namespace,
            payload=settings.ACK_PAYLOAD,
            echo=settings.ACK_ECHO_PAYLOAD,
        )
        pipeline = IngestPipeline(
            weather=weather,
            uow_factory=uow_factory,
            acknowledger=acknowledger,
        )
        self.dispatcher = MessageDispatcher(
            namespace=self.namespace,
            store=self.store,
            transport=self.transport,
            pipeline=pipeline,
            tasks=self.pool,
            acknowledger=acknowledger,
        )

        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect
        self.client.on_message = self._on_message

    def _on_connect(self, _client, _userdata, _flags, reason_code, _properties=None):
        if reason_code.is_failure:
            log.error("MQTT connect failed: %s", reason_code)
            return
        log.info("Connected to broker %s:%s", self.settings.MQTT_BROKER, self.settings.MQTT_PORT)

        for channel in sorted(HANDSHAKE_CHANNELS, key=lambda c: c.value):
            topic = wildcard_topic(self.namespace, channel)
            if self.transport.subscribe(topic):
                log.info("Subscribed to %s", topic)

        # clean sessions drop per-device subscriptions on every reconnect
        restored = restore_streaming(
            namespace=self.namespace, store=self.store, transport=self.transport
        )
        if restored:
            log.info("Restored data subscriptions for %d devices", restored)

    def _on_disconnect(self, _client, _userdata, _flags, reason_code, _properties=None):
        log.warning("Disconnected from broker: %s", reason_code)

    def _on_message(self, _client, _userdata, msg):
        try:
            self.dispatcher.dispatch(msg.topic, msg.payload)
        except Exception as exc:
            log.exception("Failed to handle message on topic %s: %s", msg.topic, exc)

    def run(self) -> None:
        settings = self.settings
        log.info("Connecting to MQTT broker at %s:%s", settings.MQTT_BROKER, settings.MQTT_PORT)
        log.info("Namespace: %s", self.namespace)

        self.pool.start()
        try:
            self.client.connect(
                settings.MQTT_BROKER, settings.MQTT_PORT, keepalive=settings.MQTT_KEEPALIVE
            )
            self.client.loop_forever()
        finally:
            self.pool.stop(drain=True)
            self.client.disconnect()


def main(settings: Optional[Settings] = None) -> None:
    MqttIngestServer(settings or get_settings()).run()
