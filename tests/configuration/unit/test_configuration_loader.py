"""Configuration loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from schema_type_sync.configuration.loader import ConfigurationError, load_configuration


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def _base_config(**overrides: object) -> dict:
    config: dict = {
        "cache": {"directory": "cache"},
        "registry": {"directory": "registry"},
    }
    config.update(overrides)
    return config


def test_loads_yaml_configuration_with_defaults(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "config.yaml",
        """
cache:
  directory: schemas
registry:
  directory: /var/lib/types
transport:
  bootstrap_servers: "localhost:9092, localhost:9093"
  topic: "schemas.*"
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.cache.directory == (tmp_path / "schemas").resolve()
    assert configuration.cache.scan_interval_seconds == 30
    assert configuration.registry.directory == Path("/var/lib/types")
    assert configuration.registry.container_path == "_types_"
    assert configuration.registry.timeout_seconds == 30
    assert configuration.registry.allow_delete is True
    transport = configuration.transport
    assert transport is not None
    assert transport.bootstrap_servers == ("localhost:9092", "localhost:9093")
    assert transport.group_id == "schema-type-sync"
    assert transport.security == {}
    assert transport.poll_interval_ms == 500
    assert transport.auto_offset_reset == "earliest"


def test_loads_json_configuration_with_explicit_values(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "config.json",
        json.dumps(
            _base_config(
                cache={"directory": "cache", "scan_interval_seconds": 0},
                registry={
                    "directory": "registry",
                    "container_path": "plant/_types_",
                    "timeout_seconds": 5,
                    "allow_delete": False,
                },
                transport={
                    "bootstrap_servers": ["broker:9092"],
                    "topic": "schemas",
                    "group_id": "plant-sync",
                    "security": {"security.protocol": "SSL"},
                    "poll_interval_ms": 250,
                    "auto_offset_reset": "LATEST",
                },
            )
        ),
    )

    configuration = load_configuration(config_path)

    assert configuration.cache.scan_interval_seconds == 0
    assert configuration.registry.container_path == "plant/_types_"
    assert configuration.registry.timeout_seconds == 5
    assert configuration.registry.allow_delete is False
    assert configuration.transport is not None
    assert configuration.transport.group_id == "plant-sync"
    assert configuration.transport.security == {"security.protocol": "SSL"}
    assert configuration.transport.auto_offset_reset == "latest"


@pytest.mark.parametrize("transport", [None, {"enabled": False, "topic": 7}])
def test_transport_absent_or_disabled(tmp_path: Path, transport: dict | None) -> None:
    config = _base_config()
    if transport is not None:
        config["transport"] = transport
    config_path = _write_file(tmp_path / "config.json", json.dumps(config))

    assert load_configuration(config_path).transport is None


@pytest.mark.parametrize(
    ("config", "message"),
    [
        ({"registry": {"directory": "r"}}, "Configuration section 'cache' is required"),
        ({"cache": {"directory": "c"}}, "Configuration section 'registry' is required"),
        (_base_config(cache={"directory": "  "}), "cache.directory must not be empty"),
        (
            _base_config(cache={"directory": "c", "scan_interval_seconds": "often"}),
            "cache.scan_interval_seconds must be an integer",
        ),
        (
            _base_config(registry={"directory": "r", "timeout_seconds": 0}),
            "registry.timeout_seconds must be greater than zero",
        ),
        (
            _base_config(registry={"directory": "r", "allow_delete": "yes"}),
            "registry.allow_delete must be true or false",
        ),
        (
            _base_config(transport={"topic": "schemas"}),
            "transport.bootstrap_servers is required",
        ),
        (
            _base_config(transport={"bootstrap_servers": " , ", "topic": "schemas"}),
            "transport.bootstrap_servers must contain at least one server",
        ),
        (
            _base_config(transport={"bootstrap_servers": "b:9092"}),
            "transport.topic must be a string",
        ),
        (
            _base_config(
                transport={"bootstrap_servers": "b:9092", "topic": "s", "security": ["x"]}
            ),
            "transport.security must be a mapping",
        ),
        (
            _base_config(
                transport={"bootstrap_servers": "b:9092", "topic": "s", "auto_offset_reset": "x"}
            ),
            "transport.auto_offset_reset must be 'earliest' or 'latest'",
        ),
    ],
)
def test_invalid_configuration_is_rejected(tmp_path: Path, config: dict, message: str) -> None:
    config_path = _write_file(tmp_path / "config.json", json.dumps(config))

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path)


def test_errors_when_configuration_root_is_not_mapping(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "- just\n- a list\n")

    with pytest.raises(ConfigurationError, match="Configuration root must be a mapping"):
        load_configuration(config_path)


def test_errors_when_file_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_configuration(tmp_path / "absent.yaml")
