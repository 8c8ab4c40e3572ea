"""Coordinator wiring the schema cache, type synchronizer and schema transport."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from schema_type_sync.configuration.runtime_settings import Configuration, TransportSettings
from schema_type_sync.schema_cache.schema_store import (
    CacheIOError,
    SchemaCache,
    check_schema_name,
)
from schema_type_sync.schema_management.schema_parser import SchemaParseError
from schema_type_sync.schema_transport.schema_event_listener import SchemaEventListener
from schema_type_sync.schema_transport.schema_events import SchemaMessageHandler
from schema_type_sync.synchronization.reconciliation import (
    PeriodicReconciliation,
    ReconciliationOutcome,
    reconcile_once,
)
from schema_type_sync.synchronization.type_synchronizer import TypeSynchronizer
from schema_type_sync.type_registry.directory_registry import DirectoryTypeRegistry

LOGGER = logging.getLogger(__name__)


class SchemaListener(Protocol):
    """Transport side of the service: delivers events to the handler it was built with."""

    @property
    def is_connected(self) -> bool: ...

    def start(self) -> None: ...

    def stop(self, timeout: float | None = None) -> None: ...


ListenerFactory = Callable[[SchemaMessageHandler], SchemaListener]


class SchemaSyncService:
    """Keeps the registry's type set converged with the schema cache.

    Startup problems (unusable cache directory, unreachable registry or
    broker) are logged and the service keeps running in a degraded state;
    later arrivals and reconciliation passes recover.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        cache: SchemaCache,
        synchronizer: TypeSynchronizer,
        *,
        allow_delete: bool = True,
        scan_interval_seconds: float = 0,
        listener_factory: ListenerFactory | None = None,
    ) -> None:
        self._cache = cache
        self._synchronizer = synchronizer
        self._allow_delete = allow_delete
        self._listener_factory = listener_factory
        self._listener: SchemaListener | None = None
        self._reconciliation = PeriodicReconciliation(
            cache,
            synchronizer,
            interval_seconds=scan_interval_seconds,
            allow_delete=allow_delete,
        )
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def transport_connected(self) -> bool:
        return self._listener is not None and self._listener.is_connected

    @property
    def cached_schema_count(self) -> int:
        return self._cache.count()

    @property
    def registered_type_count(self) -> int:
        return self._synchronizer.registered_count

    def startup(self) -> None:
        """Load the cache, start the transport, sync everything and schedule scans."""
        LOGGER.info("Starting schema sync service")
        try:
            self._cache.initialize()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Schema cache unavailable, continuing with an empty cache: %s", exc)

        if self._listener_factory is not None:
            self._start_listener(self._listener_factory)
        else:
            LOGGER.info("Schema transport disabled by configuration")

        self._running = True
        self.sync_all()
        self._reconciliation.start()
        LOGGER.info("Schema sync service started")

    def shutdown(self) -> None:
        LOGGER.info("Shutting down schema sync service")
        self._running = False
        self._reconciliation.stop()
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
        LOGGER.info("Schema sync service shutdown complete")

    def sync_all(self) -> int:
        LOGGER.info("Syncing %d cached schemas to type definitions", self._cache.count())
        return self._synchronizer.sync_all(self._cache.all_parsed())

    def scan_and_sync(self) -> ReconciliationOutcome | None:
        """Run one reconciliation pass outside the periodic schedule."""
        if not self._running:
            return None
        return reconcile_once(self._cache, self._synchronizer, allow_delete=self._allow_delete)

    def on_schema_received(self, name: str, raw_text: str) -> None:
        if not self._running:
            LOGGER.warning("Received schema while not running, ignoring: %s", name)
            return

        LOGGER.info("Processing received schema %s", name)
        try:
            schema = self._cache.save(name, raw_text)
        except SchemaParseError as exc:
            LOGGER.error("Invalid JSON Schema received for %s: %s", name, exc)
            return
        except CacheIOError as exc:
            LOGGER.error("Failed to save schema %s to cache: %s", name, exc)
            return

        if self._synchronizer.sync_one(schema):
            LOGGER.info("Processed schema %s", name)
        else:
            LOGGER.error("Failed to sync schema %s to a type definition", name)

    def on_schema_deleted(self, name: str) -> None:
        if not self._running:
            return
        try:
            check_schema_name(name)
        except CacheIOError as exc:
            LOGGER.error("Ignoring deletion signal: %s", exc)
            return

        LOGGER.info("Processing schema deletion %s", name)
        if self._allow_delete:
            self._synchronizer.remove(name)
        else:
            LOGGER.info("Skipping type removal for schema %s (allow_delete=false)", name)

        try:
            self._cache.remove(name)
        except CacheIOError as exc:
            LOGGER.error("Failed to delete schema %s from cache: %s", name, exc)
            return
        LOGGER.info("Processed schema deletion %s", name)

    def _start_listener(self, factory: ListenerFactory) -> None:
        listener = factory(self)
        try:
            listener.start()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error(
                "Failed to start schema transport: %s. Updates will only arrive via cache scans.",
                exc,
            )
        self._listener = listener


def create_sync_service(
    configuration: Configuration,
) -> tuple[SchemaSyncService, DirectoryTypeRegistry]:
    """Build a service and its registry from configuration; the caller closes the registry."""
    registry = DirectoryTypeRegistry(configuration.registry.directory)
    synchronizer = TypeSynchronizer(
        registry,
        container_path=configuration.registry.container_path,
        timeout_seconds=configuration.registry.timeout_seconds,
    )
    cache = SchemaCache(configuration.cache.directory)

    service = SchemaSyncService(
        cache,
        synchronizer,
        allow_delete=configuration.registry.allow_delete,
        scan_interval_seconds=configuration.cache.scan_interval_seconds,
        listener_factory=_kafka_listener_factory(configuration.transport),
    )
    return service, registry


def _kafka_listener_factory(transport: TransportSettings | None) -> ListenerFactory | None:
    if transport is None:
        return None

    def _factory(handler: SchemaMessageHandler) -> SchemaListener:
        return SchemaEventListener(transport, handler)

    return _factory
