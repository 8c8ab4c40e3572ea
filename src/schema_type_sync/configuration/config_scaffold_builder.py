"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration template for schema-type-sync.
# Replace every <REQUIRED> placeholder before running sync or serve.
# Relative paths resolve against the directory of this file.

cache:
  # Directory holding one <name>.json file per schema.
  directory: "<REQUIRED>"
  # Seconds between cache scans; 0 or less disables periodic reconciliation.
  scan_interval_seconds: 30

registry:
  # Root directory of the type registry.
  directory: "<REQUIRED>"
  container_path: "_types_"
  timeout_seconds: 30
  # Remove registry types whose schema disappeared from the cache.
  allow_delete: true

# Remove this section (or set enabled: false) to run without a schema feed.
transport:
  enabled: true
  bootstrap_servers:
    - "<REQUIRED>"
  # Record key (or topic suffix) names the schema; an empty payload deletes it.
  topic: "<REQUIRED>"
  group_id: "schema-type-sync"
  security:
    sasl.username: "<OPTIONAL>"
    sasl.password: "<OPTIONAL>"
    security.protocol: "<OPTIONAL>"
    sasl.mechanisms: "<OPTIONAL>"
  poll_interval_ms: 500
  auto_offset_reset: "earliest"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
