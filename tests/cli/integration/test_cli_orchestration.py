"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import schema_type_sync.cli as cli_module
from click.testing import CliRunner
from openpyxl import load_workbook
from schema_type_sync.cli import cli
from schema_type_sync.type_registry import DirectoryTypeRegistry


def _write_config(tmp_path: Path) -> Path:
    cache_directory = tmp_path / "cache"
    cache_directory.mkdir()
    (cache_directory / "Sensor.json").write_text(
        json.dumps(
            {
                "title": "Sensor",
                "properties": {
                    "value": {"type": "number", "format": "float"},
                    "unit": {"type": "string"},
                },
            }
        ),
        encoding="utf-8",
    )
    config = {
        "cache": {"directory": str(cache_directory), "scan_interval_seconds": 0},
        "registry": {"directory": str(tmp_path / "registry")},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return path


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "config.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0, result.output
    assert str(output_path.resolve()) in result.output
    assert "registry:" in output_path.read_text(encoding="utf-8")


def test_translate_prints_nested_then_primary_definitions(tmp_path: Path) -> None:
    schema_path = tmp_path / "device.json"
    schema_path.write_text(
        json.dumps(
            {
                "properties": {
                    "sensor": {
                        "type": "object",
                        "properties": {"temperature": {"type": "number"}},
                    }
                }
            }
        ),
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["translate", "--schema", str(schema_path), "--name", "Device"])

    assert result.exit_code == 0, result.output
    definitions = json.loads(result.stdout)
    assert [definition["name"] for definition in definitions] == ["Device_sensor", "Device"]
    assert definitions[0]["tags"][0]["dataType"] == "Float8"
    assert definitions[1]["tags"][0]["typeId"] == "Device_sensor"


def test_translate_defaults_name_to_file_stem(tmp_path: Path) -> None:
    schema_path = tmp_path / "Valve.json"
    schema_path.write_text('{"properties": {"open": {"type": "boolean"}}}', encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(cli, ["translate", "--schema", str(schema_path)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)[0]["name"] == "Valve"


def test_sync_command_applies_cache_and_writes_report(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)
    report_path = tmp_path / "report.xlsx"
    runner = CliRunner()

    result = runner.invoke(
        cli,
        [
            "--log-level",
            "warning",
            "sync",
            "--config",
            str(config_path),
            "--report",
            str(report_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "synced 1/1" in result.output
    assert str(report_path.resolve()) in result.output
    registry = DirectoryTypeRegistry(tmp_path / "registry")
    sensor = registry.read_definition("_types_", "Sensor")
    registry.close()
    assert sensor is not None
    assert [tag["dataType"] for tag in sensor["tags"]] == ["Float4", "String"]
    assert load_workbook(report_path)["Types"].cell(row=2, column=5).value == "SYNCED"


def test_serve_starts_and_stops_service(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = _write_config(tmp_path)
    monkeypatch.setattr(cli_module, "_wait_for_shutdown", lambda: None)
    runner = CliRunner()

    result = runner.invoke(cli, ["serve", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "stopped: 1 schemas cached, 1 types registered" in result.output
    assert (tmp_path / "registry" / "_types_" / "Sensor.json").exists()
