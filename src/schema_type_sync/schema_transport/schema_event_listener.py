"""Kafka listener delivering schema arrival and deletion events."""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, Protocol

from confluent_kafka import Consumer, KafkaError

from schema_type_sync.configuration.runtime_settings import TransportSettings

from .schema_events import SchemaEvent, SchemaMessageHandler

LOGGER = logging.getLogger(__name__)

_KAFKA_CLIENT_LOGGER = logging.getLogger("schema_type_sync.kafka.client")
_KAFKA_CLIENT_LOGGER.addHandler(logging.NullHandler())
_KAFKA_CLIENT_LOGGER.propagate = False
_KAFKA_CLIENT_LOGGER.setLevel(logging.CRITICAL + 1)

_TOPIC_SEPARATORS = re.compile(r"[./]")
_TOPIC_WILDCARDS = re.compile(r"[#+*]")


class SchemaTransportError(Exception):
    """Raised when the transport reports a non-recoverable error."""


class KafkaConsumerProtocol(Protocol):
    """Protocol implemented by both real and fake consumers."""

    def subscribe(self, topics: list[str], **kwargs: Any) -> None: ...

    def poll(self, timeout: float) -> _KafkaRawMessage | None: ...

    def close(self) -> None: ...


class _KafkaRawMessage(Protocol):
    """Subset of Kafka message API required by the listener."""

    def error(self) -> Any: ...

    def topic(self) -> str | None: ...

    def key(self) -> bytes | None: ...

    def value(self) -> bytes | None: ...


def extract_schema_name(topic: str, base_topic: str) -> str | None:
    """Derive a schema name from the topic a record arrived on.

    With base topic ``schemas.*``: ``schemas.Sensor`` gives ``Sensor`` and
    ``schemas.devices.Temperature`` gives ``devices_Temperature``. Topics
    outside the base fall back to their last segment.
    """
    base = _TOPIC_WILDCARDS.sub("", base_topic.lstrip("^")).rstrip("./")
    if base and topic.startswith(base):
        suffix = topic[len(base) :].lstrip("./")
        return _TOPIC_SEPARATORS.sub("_", suffix) or None
    return _TOPIC_SEPARATORS.split(topic)[-1] or None


class SchemaEventListener:
    """Consumes schema records from Kafka and forwards them to a handler.

    The record key names the schema; without a key the name is derived from
    the topic. Empty payloads and tombstones are deletion signals.
    """

    def __init__(
        self,
        settings: TransportSettings,
        handler: SchemaMessageHandler,
        consumer: KafkaConsumerProtocol | None = None,
    ) -> None:
        self._settings = settings
        self._handler = handler
        self._consumer = consumer
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        """Create the consumer if needed and subscribe to the schema topic."""
        if self._consumer is None:
            self._consumer = self._create_consumer()
        self._consumer.subscribe([self._settings.topic])
        self._connected = True
        LOGGER.info("Subscribed to schema topic %s", self._settings.topic)

    def start(self) -> None:
        """Connect and start delivering events on a background thread."""
        self.connect()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="schema-event-listener", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        if self._consumer is not None and self._connected:
            self._consumer.close()
            LOGGER.info("Disconnected from schema topic %s", self._settings.topic)
        self._connected = False

    def poll_once(self) -> SchemaEvent | None:
        """Poll one record and dispatch it; returns the dispatched event if any."""
        if self._consumer is None:
            raise SchemaTransportError("Listener is not connected.")
        message = self._consumer.poll(timeout=self._settings.poll_interval_ms / 1000.0)
        if message is None:
            return None
        event = self.to_event(message)
        if event is None:
            return None
        self._dispatch(event)
        return event

    def to_event(self, message: _KafkaRawMessage) -> SchemaEvent | None:
        error = message.error()
        if error:
            if error.code() == KafkaError._PARTITION_EOF:  # pylint: disable=protected-access
                return None
            raise SchemaTransportError(f"Kafka error: {error}")

        key = (_decode_text(message.key()) or "").strip()
        name = key or extract_schema_name(message.topic() or "", self._settings.topic)
        if not name:
            LOGGER.warning(
                "Could not resolve schema name for record on topic %s", message.topic()
            )
            return None

        value = message.value()
        payload = _decode_text(value) if value is not None else ""
        if payload is None:
            LOGGER.warning("Dropping schema %s: payload is not valid UTF-8", name)
            return None
        return SchemaEvent(name=name, payload=payload)

    def _dispatch(self, event: SchemaEvent) -> None:
        if event.is_deletion:
            LOGGER.info("Received delete signal for schema %s", event.name)
            self._handler.on_schema_deleted(event.name)
        else:
            LOGGER.info("Received schema update %s (%d chars)", event.name, len(event.payload))
            self._handler.on_schema_received(event.name, event.payload)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception:  # pylint: disable=broad-exception-caught
                LOGGER.exception("Error processing schema record")

    def _create_consumer(self) -> KafkaConsumerProtocol:
        config: dict[str, object] = {
            "bootstrap.servers": ",".join(self._settings.bootstrap_servers),
            "group.id": self._settings.group_id,
            "enable.auto.commit": True,
            "auto.offset.reset": self._settings.auto_offset_reset,
        }
        config.update(self._settings.security)
        return Consumer(config, logger=_KAFKA_CLIENT_LOGGER)


def _decode_text(raw: bytes | None) -> str | None:
    if raw is None:
        return None
    try:
        return bytes(raw).decode("utf-8")
    except UnicodeDecodeError:
        return None
