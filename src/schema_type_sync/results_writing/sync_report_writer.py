"""Sync report workbook writer service."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .report_models import SyncReportEntry, SyncRunMetadata, SyncStatus

TYPES_SHEET_NAME = "Types"
RUN_INFO_SHEET_NAME = "RunInfo"
TYPES_COLUMNS: tuple[str, ...] = ("Schema", "Base Type", "Members", "Nested Types", "Status")


def write_sync_report(
    output_path: Path | str,
    entries: Sequence[SyncReportEntry],
    run_metadata: SyncRunMetadata,
) -> Path:
    """Write the sync report workbook and return its resolved path."""
    workbook = Workbook()
    sheet = workbook.active
    if sheet is None:
        raise RuntimeError("Workbook active sheet is not available.")
    assert isinstance(sheet, Worksheet)
    sheet.title = TYPES_SHEET_NAME

    _write_types_sheet(sheet, entries)
    _write_run_info_sheet(workbook, entries, run_metadata)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    return output.resolve()


def _write_types_sheet(sheet: Worksheet, entries: Sequence[SyncReportEntry]) -> None:
    for column_index, name in enumerate(TYPES_COLUMNS, start=1):
        sheet.cell(row=1, column=column_index, value=name)
        sheet.cell(row=1, column=column_index).style = "Headline 1"

    widths = [len(name) for name in TYPES_COLUMNS]
    for row_index, entry in enumerate(entries, start=2):
        values = (
            entry.schema_name,
            entry.base_type or "",
            entry.member_count,
            ", ".join(entry.nested_types),
            entry.status.value,
        )
        for column_index, value in enumerate(values, start=1):
            sheet.cell(row=row_index, column=column_index, value=value)
            widths[column_index - 1] = max(widths[column_index - 1], len(str(value)))

    for column_index, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(column_index)].width = max(
            12, min(width + 6, 60)
        )


def _write_run_info_sheet(
    workbook: Workbook,
    entries: Sequence[SyncReportEntry],
    run_metadata: SyncRunMetadata,
) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    synced = sum(1 for entry in entries if entry.status == SyncStatus.SYNCED)
    rows = (
        ("run_start", run_metadata.run_start.isoformat()),
        ("cache_directory", str(run_metadata.cache_directory)),
        ("registry_directory", str(run_metadata.registry_directory)),
        ("container_path", run_metadata.container_path),
        ("schemas", len(entries)),
        ("synced", synced),
        ("failed", len(entries) - synced),
        ("nested_types", sum(len(entry.nested_types) for entry in entries)),
    )
    for row, (key, value) in enumerate(rows, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
