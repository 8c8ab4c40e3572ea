"""Schema sync service exports."""

from .schema_sync_service import SchemaSyncService, create_sync_service
from .sync_run_use_case import SyncRunError, SyncRunOutcome, SyncRunRequest, execute_sync_run

__all__ = [
    "SchemaSyncService",
    "SyncRunError",
    "SyncRunOutcome",
    "SyncRunRequest",
    "create_sync_service",
    "execute_sync_run",
]
