"""Type definition synchronization service."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Sequence
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError

from schema_type_sync.definition_building import (
    TypeArtifact,
    build_nested_artifacts,
    build_primary_artifact,
    render_artifacts_json,
)
from schema_type_sync.schema_management.schema_models import SchemaModel
from schema_type_sync.type_registry.registry_contracts import (
    ApplyResult,
    CollisionPolicy,
    TargetApplyFailure,
    TargetUnavailable,
    TypeRegistry,
    all_good,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_CONTAINER_PATH = "_types_"
DEFAULT_TIMEOUT_SECONDS = 30.0


class TypeSynchronizer:
    """Applies schema-derived type definitions to the target registry.

    The registered-type set only records outcomes for introspection; every
    sync re-applies definitions with the overwrite policy.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        *,
        container_path: str = DEFAULT_CONTAINER_PATH,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._registry = registry
        self._container_path = container_path
        self._timeout_seconds = timeout_seconds
        self._lock = threading.Lock()
        self._registered: set[str] = set()
        self._last_payloads: dict[str, str] = {}

    @property
    def container_path(self) -> str:
        return self._container_path

    def sync_one(self, schema: SchemaModel) -> bool:
        """Apply nested definitions, then the schema's own definition.

        Returns True only when the primary definition was applied cleanly.
        """
        return self.apply_artifacts(build_primary_artifact(schema), build_nested_artifacts(schema))

    def apply_artifacts(self, primary: TypeArtifact, nested: Sequence[TypeArtifact] = ()) -> bool:
        """Apply already built artifacts, nested ones first."""
        name = primary.name
        LOGGER.info("Syncing type definition %s", name)

        if nested:
            LOGGER.debug("Applying %d nested definitions for %s", len(nested), name)
            if not self._apply(nested, name):
                LOGGER.warning("Failed to apply nested definitions for %s", name)

        payload = render_artifacts_json([primary])
        with self._lock:
            self._last_payloads[name] = payload
        if not self._apply_payload(payload, name):
            LOGGER.error("Failed to sync type definition %s", name)
            return False

        with self._lock:
            self._registered.add(name)
        LOGGER.info("Synced type definition %s", name)
        return True

    def sync_all(self, schemas: Iterable[SchemaModel]) -> int:
        """Sync each schema independently and return how many succeeded."""
        attempted = 0
        synced = 0
        for schema in schemas:
            attempted += 1
            if self.sync_one(schema):
                synced += 1
        LOGGER.info("Synced %d/%d type definitions", synced, attempted)
        return synced

    def remove(self, name: str) -> bool:
        """Delete a type definition; deleting an absent type counts as success."""
        LOGGER.info("Removing type definition %s", name)
        try:
            future = self._registry.remove_definitions(self._container_path, [name])
            results = self._await(future, name)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Error removing type definition %s: %s", name, exc)
            return False

        if not all_good(results):
            LOGGER.error("Failed to remove type definition %s: %s", name, _describe(results))
            return False
        with self._lock:
            self._registered.discard(name)
            self._last_payloads.pop(name, None)
        LOGGER.info("Removed type definition %s", name)
        return True

    def registered_types(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._registered)

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._registered

    @property
    def registered_count(self) -> int:
        with self._lock:
            return len(self._registered)

    def last_applied_payload(self, name: str) -> str | None:
        with self._lock:
            return self._last_payloads.get(name)

    def _apply(self, artifacts: Sequence[TypeArtifact], label: str) -> bool:
        return self._apply_payload(render_artifacts_json(artifacts), label)

    def _apply_payload(self, payload: str, label: str) -> bool:
        try:
            future = self._registry.apply_definitions(
                self._container_path, payload, CollisionPolicy.OVERWRITE
            )
            results = self._await(future, label)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            LOGGER.error("Error applying definitions for %s: %s", label, exc)
            return False

        if not all_good(results):
            for index, result in enumerate(results):
                if not result.good:
                    LOGGER.error("Import error at index %d for %s: %s", index, label, result)
            return False
        return True

    def _await(self, future: Future[list[ApplyResult]], label: str) -> list[ApplyResult]:
        try:
            return list(future.result(timeout=self._timeout_seconds))
        except FutureTimeoutError as exc:
            future.cancel()
            raise TargetApplyFailure(
                f"Registry call for {label} timed out after {self._timeout_seconds}s"
            ) from exc
        except TargetUnavailable:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise TargetApplyFailure(f"Registry call for {label} failed: {exc}") from exc


def _describe(results: Sequence[ApplyResult]) -> str:
    return ", ".join(f"{result.name}: {result.detail}" for result in results if not result.good)
