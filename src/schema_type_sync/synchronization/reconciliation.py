"""Periodic cache-to-registry reconciliation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from schema_type_sync.schema_cache.schema_store import SchemaCache

from .type_synchronizer import TypeSynchronizer

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationOutcome:
    """What one reconciliation pass observed and did."""

    previous_count: int
    current_count: int
    removed: frozenset[str]
    synced: int | None

    @property
    def changed(self) -> bool:
        return self.previous_count != self.current_count or bool(self.removed)


def reconcile_once(
    cache: SchemaCache, synchronizer: TypeSynchronizer, *, allow_delete: bool
) -> ReconciliationOutcome:
    """Reload the cache and converge the registry when anything changed.

    Removed schemas are deleted from the registry only when ``allow_delete``
    is set. Every cached schema is re-applied after a detected change.
    """
    previous_count = cache.count()
    removed = cache.reload()
    current_count = cache.count()

    if removed:
        if allow_delete:
            for name in sorted(removed):
                LOGGER.info("Removing type definition for deleted schema %s", name)
                synchronizer.remove(name)
        else:
            LOGGER.info(
                "Skipping type removal for %d deleted schemas (allow_delete=false)", len(removed)
            )

    if previous_count == current_count and not removed:
        LOGGER.debug("Cache scan complete, no changes detected (%d schemas)", current_count)
        return ReconciliationOutcome(previous_count, current_count, frozenset(), None)

    LOGGER.info(
        "Cache scan detected changes (%d -> %d schemas, %d deleted), syncing types",
        previous_count,
        current_count,
        len(removed),
    )
    synced = synchronizer.sync_all(cache.all_parsed())
    return ReconciliationOutcome(previous_count, current_count, frozenset(removed), synced)


class PeriodicReconciliation:
    """Runs ``reconcile_once`` with a fixed delay on a background thread."""

    def __init__(
        self,
        cache: SchemaCache,
        synchronizer: TypeSynchronizer,
        *,
        interval_seconds: float,
        allow_delete: bool,
    ) -> None:
        self._cache = cache
        self._synchronizer = synchronizer
        self._interval_seconds = interval_seconds
        self._allow_delete = allow_delete
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.passes = 0

    @property
    def enabled(self) -> bool:
        return self._interval_seconds > 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the schedule; returns False when the interval disables it."""
        if not self.enabled:
            LOGGER.info("Cache scan disabled (interval: %s seconds)", self._interval_seconds)
            return False
        if self.running:
            return True
        LOGGER.info("Starting periodic cache scan (interval: %s seconds)", self._interval_seconds)
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="schema-reconciliation", daemon=True
        )
        self._thread.start()
        return True

    def stop(self, timeout: float | None = None) -> None:
        """Cancel future passes; a pass already running is allowed to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval_seconds):
            try:
                reconcile_once(self._cache, self._synchronizer, allow_delete=self._allow_delete)
            except Exception:  # pylint: disable=broad-exception-caught
                LOGGER.exception("Error during cache scan")
            self.passes += 1
