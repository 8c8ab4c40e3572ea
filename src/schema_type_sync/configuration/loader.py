"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import CacheSettings, Configuration, RegistrySettings, TransportSettings

DEFAULT_SCAN_INTERVAL_SECONDS = 30
DEFAULT_CONTAINER_PATH = "_types_"
DEFAULT_REGISTRY_TIMEOUT_SECONDS = 30
DEFAULT_GROUP_ID = "schema-type-sync"
_AUTO_OFFSET_RESET_VALUES = frozenset({"earliest", "latest"})


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.parent
    return Configuration(
        path=path,
        cache=_parse_cache_section(parsed.get("cache"), base_path),
        registry=_parse_registry_section(parsed.get("registry"), base_path),
        transport=_parse_transport_section(parsed.get("transport")),
    )


def _parse_cache_section(value: Any, base_path: Path) -> CacheSettings:
    section = _require_mapping(value, "cache")
    directory = _require_non_empty_string(section.get("directory"), "cache.directory")
    scan_interval = _require_int(
        section.get("scan_interval_seconds", DEFAULT_SCAN_INTERVAL_SECONDS),
        "cache.scan_interval_seconds",
    )
    return CacheSettings(
        directory=_resolve_path(base_path, directory),
        scan_interval_seconds=scan_interval,
    )


def _parse_registry_section(value: Any, base_path: Path) -> RegistrySettings:
    section = _require_mapping(value, "registry")
    directory = _require_non_empty_string(section.get("directory"), "registry.directory")
    container_path = _require_non_empty_string(
        section.get("container_path", DEFAULT_CONTAINER_PATH), "registry.container_path"
    )
    timeout_seconds = _require_positive_int(
        section.get("timeout_seconds", DEFAULT_REGISTRY_TIMEOUT_SECONDS),
        "registry.timeout_seconds",
    )
    allow_delete = _require_bool(section.get("allow_delete", True), "registry.allow_delete")
    return RegistrySettings(
        directory=_resolve_path(base_path, directory),
        container_path=container_path,
        timeout_seconds=timeout_seconds,
        allow_delete=allow_delete,
    )


def _parse_transport_section(value: Any) -> TransportSettings | None:
    if value is None:
        return None
    section = _require_mapping(value, "transport")
    enabled = _require_bool(section.get("enabled", True), "transport.enabled")
    if not enabled:
        return None
    bootstrap_servers = _normalize_bootstrap_servers(section.get("bootstrap_servers"))
    topic = _require_non_empty_string(section.get("topic"), "transport.topic")
    group_id = _optional_string(section.get("group_id"), "transport.group_id") or DEFAULT_GROUP_ID
    security = section.get("security") or {}
    if not isinstance(security, Mapping):
        raise ConfigurationError("transport.security must be a mapping.")
    poll_interval_ms = _require_positive_int(
        section.get("poll_interval_ms", 500), "transport.poll_interval_ms"
    )
    auto_offset_reset = _require_non_empty_string(
        section.get("auto_offset_reset", "earliest"), "transport.auto_offset_reset"
    ).lower()
    if auto_offset_reset not in _AUTO_OFFSET_RESET_VALUES:
        raise ConfigurationError("transport.auto_offset_reset must be 'earliest' or 'latest'.")
    return TransportSettings(
        enabled=True,
        bootstrap_servers=bootstrap_servers,
        topic=topic,
        group_id=group_id,
        security=dict(security),
        poll_interval_ms=poll_interval_ms,
        auto_offset_reset=auto_offset_reset,
    )


def _normalize_bootstrap_servers(value: Any) -> tuple[str, ...]:
    if value is None:
        raise ConfigurationError("transport.bootstrap_servers is required.")
    servers: list[str] = []
    if isinstance(value, str):
        servers = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, Sequence):
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError("transport.bootstrap_servers entries must be strings.")
            stripped = item.strip()
            if stripped:
                servers.append(stripped)
    else:
        raise ConfigurationError(
            "transport.bootstrap_servers must be a string or list of strings."
        )
    if not servers:
        raise ConfigurationError(
            "transport.bootstrap_servers must contain at least one server."
        )
    return tuple(servers)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be true or false.")
    return value


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return number
