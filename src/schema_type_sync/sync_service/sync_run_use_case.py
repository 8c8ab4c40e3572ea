"""One-shot sync use-case service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from schema_type_sync.configuration import ConfigurationError, load_configuration
from schema_type_sync.definition_building import build_nested_artifacts, build_primary_artifact
from schema_type_sync.results_writing import (
    SyncReportEntry,
    SyncRunMetadata,
    SyncStatus,
    write_sync_report,
)
from schema_type_sync.schema_cache.schema_store import CacheIOError, SchemaCache
from schema_type_sync.schema_management.schema_models import SchemaModel
from schema_type_sync.synchronization.type_synchronizer import TypeSynchronizer
from schema_type_sync.type_registry.directory_registry import DirectoryTypeRegistry


class SyncRunError(Exception):
    """Raised when a one-shot sync cannot be completed."""


@dataclass(frozen=True)
class SyncRunRequest:
    """Input contract for one sync run."""

    config_path: str
    report_path: str | None = None


@dataclass(frozen=True)
class SyncRunOutcome:
    """Output contract for one completed sync run."""

    total: int
    synced: int
    entries: tuple[SyncReportEntry, ...]
    report_path: Path | None


def execute_sync_run(request: SyncRunRequest) -> SyncRunOutcome:
    """Load the cache, apply every schema to the registry once, optionally write a report."""
    try:
        configuration = load_configuration(request.config_path)
    except (ConfigurationError, OSError) as exc:
        raise SyncRunError(str(exc)) from exc

    run_start = datetime.now(UTC)
    cache = SchemaCache(configuration.cache.directory)
    try:
        cache.initialize()
    except CacheIOError as exc:
        raise SyncRunError(str(exc)) from exc

    registry = DirectoryTypeRegistry(configuration.registry.directory)
    try:
        synchronizer = TypeSynchronizer(
            registry,
            container_path=configuration.registry.container_path,
            timeout_seconds=configuration.registry.timeout_seconds,
        )
        schemas = sorted(cache.all_parsed(), key=lambda schema: schema.name)
        entries = tuple(_sync_with_entry(synchronizer, schema) for schema in schemas)
    finally:
        registry.close()

    report_path = None
    if request.report_path:
        metadata = SyncRunMetadata(
            run_start=run_start,
            cache_directory=configuration.cache.directory,
            registry_directory=configuration.registry.directory,
            container_path=configuration.registry.container_path,
        )
        try:
            report_path = write_sync_report(request.report_path, entries, metadata)
        except OSError as exc:
            raise SyncRunError(f"Failed to write sync report: {exc}") from exc

    return SyncRunOutcome(
        total=len(entries),
        synced=sum(1 for entry in entries if entry.status == SyncStatus.SYNCED),
        entries=entries,
        report_path=report_path,
    )


def _sync_with_entry(synchronizer: TypeSynchronizer, schema: SchemaModel) -> SyncReportEntry:
    primary = build_primary_artifact(schema)
    nested = build_nested_artifacts(schema)
    synced = synchronizer.apply_artifacts(primary, nested)
    status = SyncStatus.SYNCED if synced else SyncStatus.FAILED
    return SyncReportEntry(
        schema_name=schema.name,
        base_type=primary.base_type,
        member_count=len(primary.members),
        nested_types=tuple(artifact.name for artifact in nested),
        status=status,
    )
