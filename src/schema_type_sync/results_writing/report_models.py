"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class SyncStatus(str, Enum):
    """Rendered outcome of syncing one schema."""

    SYNCED = "SYNCED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class SyncReportEntry:
    """One schema row of the sync report."""

    schema_name: str
    base_type: str | None
    member_count: int
    nested_types: tuple[str, ...]
    status: SyncStatus


@dataclass(frozen=True)
class SyncRunMetadata:
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    cache_directory: Path
    registry_directory: Path
    container_path: str
