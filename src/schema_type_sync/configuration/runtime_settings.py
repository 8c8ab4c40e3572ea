"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CacheSettings:
    """Local schema cache configuration."""

    directory: Path
    scan_interval_seconds: int


@dataclass(frozen=True)
class RegistrySettings:
    """Target type registry configuration."""

    directory: Path
    container_path: str
    timeout_seconds: int
    allow_delete: bool


@dataclass(frozen=True)
class TransportSettings:
    """Kafka schema transport configuration."""

    enabled: bool
    bootstrap_servers: tuple[str, ...]
    topic: str
    group_id: str
    security: Mapping[str, object]
    poll_interval_ms: int
    auto_offset_reset: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    cache: CacheSettings
    registry: RegistrySettings
    transport: TransportSettings | None
