"""End-to-end sync tests against the directory registry."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from openpyxl import load_workbook
from schema_type_sync.configuration import load_configuration
from schema_type_sync.results_writing import SyncStatus
from schema_type_sync.sync_service import (
    SyncRunError,
    SyncRunRequest,
    create_sync_service,
    execute_sync_run,
)
from schema_type_sync.synchronization import TypeSynchronizer
from schema_type_sync.type_registry import DirectoryTypeRegistry

DEVICE = json.dumps(
    {
        "title": "Device",
        "allOf": [{"$ref": "#/definitions/Asset"}],
        "properties": {
            "sensor": {"type": "object", "properties": {"temperature": {"type": "number"}}},
            "serial": {"type": "string"},
        },
    }
)
ASSET = json.dumps({"properties": {"tag": {"type": "string"}}})


def _write_config(tmp_path: Path, *, allow_delete: bool = True) -> Path:
    cache_directory = tmp_path / "cache"
    cache_directory.mkdir()
    (cache_directory / "Device.json").write_text(DEVICE, encoding="utf-8")
    (cache_directory / "Asset.json").write_text(ASSET, encoding="utf-8")
    (cache_directory / "Broken.json").write_text("{oops", encoding="utf-8")
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"""
cache:
  directory: cache
  scan_interval_seconds: 0
registry:
  directory: registry
  allow_delete: {str(allow_delete).lower()}
""",
        encoding="utf-8",
    )
    return config_path


def test_sync_run_applies_every_cached_schema_and_writes_report(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)
    report_path = tmp_path / "reports" / "sync.xlsx"

    outcome = execute_sync_run(
        SyncRunRequest(config_path=str(config_path), report_path=str(report_path))
    )

    assert (outcome.total, outcome.synced) == (2, 2)
    assert [entry.schema_name for entry in outcome.entries] == ["Asset", "Device"]
    device_entry = outcome.entries[1]
    assert device_entry.base_type == "Asset"
    assert device_entry.nested_types == ("Device_sensor",)
    assert device_entry.status is SyncStatus.SYNCED

    registry = DirectoryTypeRegistry(tmp_path / "registry")
    assert registry.definition_names("_types_") == ["Asset", "Device", "Device_sensor"]
    device = registry.read_definition("_types_", "Device")
    assert device is not None
    assert device["typeId"] == "Asset"
    assert device["tags"][0] == {
        "name": "sensor",
        "tagType": "UdtInstance",
        "typeId": "Device_sensor",
    }
    registry.close()

    assert outcome.report_path == report_path.resolve()
    workbook = load_workbook(report_path)
    assert workbook.sheetnames == ["Types", "RunInfo"]
    rows = list(workbook["Types"].iter_rows(values_only=True))
    assert rows[0] == ("Schema", "Base Type", "Members", "Nested Types", "Status")
    assert rows[2] == ("Device", "Asset", 2, "Device_sensor", "SYNCED")


def test_sync_run_with_missing_configuration_fails(tmp_path: Path) -> None:
    with pytest.raises(SyncRunError, match="Configuration file not found"):
        execute_sync_run(SyncRunRequest(config_path=str(tmp_path / "missing.yaml")))


def test_service_from_configuration_converges_registry(tmp_path: Path) -> None:
    configuration = load_configuration(_write_config(tmp_path))
    service, registry = create_sync_service(configuration)
    try:
        service.startup()
        assert not service.transport_connected
        assert registry.definition_names("_types_") == ["Asset", "Device", "Device_sensor"]

        (tmp_path / "cache" / "Asset.json").unlink()
        outcome = service.scan_and_sync()

        assert outcome is not None
        assert outcome.removed == frozenset({"Asset"})
        assert registry.definition_names("_types_") == ["Device", "Device_sensor"]

        service.on_schema_received("Pump", '{"properties": {"rpm": {"type": "integer"}}}')
        assert "Pump" in registry.definition_names("_types_")

        service.on_schema_deleted("Pump")
        assert "Pump" not in registry.definition_names("_types_")
        assert not (tmp_path / "cache" / "Pump.json").exists()
    finally:
        service.shutdown()
        registry.close()


def test_sync_run_applies_the_artifacts_it_reports(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config_path = _write_config(tmp_path)

    def _rebuild(self: TypeSynchronizer, schema: object) -> bool:
        raise AssertionError("definitions must not be rebuilt per schema")

    monkeypatch.setattr(TypeSynchronizer, "sync_one", _rebuild)

    outcome = execute_sync_run(SyncRunRequest(config_path=str(config_path)))

    assert (outcome.total, outcome.synced) == (2, 2)
    assert outcome.report_path is None
