"""Results writing domain exports."""

from .report_models import SyncReportEntry, SyncRunMetadata, SyncStatus
from .sync_report_writer import RUN_INFO_SHEET_NAME, TYPES_SHEET_NAME, write_sync_report

__all__ = [
    "RUN_INFO_SHEET_NAME",
    "SyncReportEntry",
    "SyncRunMetadata",
    "SyncStatus",
    "TYPES_SHEET_NAME",
    "write_sync_report",
]
