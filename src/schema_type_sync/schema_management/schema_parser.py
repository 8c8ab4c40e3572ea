"""JSON Schema parsing service."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from .schema_models import PropertyDefinition, ScalarValue, SchemaModel

LOGGER = logging.getLogger(__name__)

_JSON_SUFFIX = ".json"


class SchemaParseError(Exception):
    """Raised when schema text cannot be turned into a schema model."""


def parse_schema(default_name: str, raw_text: str) -> SchemaModel:
    """Parse JSON Schema text into a schema model.

    Args:
      default_name: Name used when the document carries no ``title``.
      raw_text: The JSON Schema document.

    Raises:
      SchemaParseError: If the text is not JSON, the root is not an object,
        nesting exceeds the interpreter's recursion limit, or a property
        definition is structurally unusable.
    """
    try:
        root = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError, RecursionError) as exc:
        raise SchemaParseError(f"Failed to parse JSON Schema '{default_name}': {exc}") from exc

    if not isinstance(root, Mapping):
        raise SchemaParseError(f"JSON Schema '{default_name}' root must be an object.")

    try:
        schema = _parse_root(default_name, root)
    except RecursionError as exc:
        raise SchemaParseError(f"JSON Schema '{default_name}' is nested too deeply.") from exc
    LOGGER.debug(
        "Parsed schema %s (%d properties, required=%s)",
        schema.name,
        len(schema.properties),
        sorted(schema.required),
    )
    return schema


def extract_reference_name(reference: str) -> str:
    """Return the type name addressed by a ``$ref`` value.

    ``#/definitions/Address`` gives ``Address`` and
    ``https://example.com/schemas/base.json`` gives ``base``.
    """
    if "/" not in reference:
        return reference
    last_segment = reference.split("/")[-1]
    if last_segment.endswith(_JSON_SUFFIX):
        return last_segment[: -len(_JSON_SUFFIX)]
    return last_segment


def _parse_root(default_name: str, root: Mapping[str, Any]) -> SchemaModel:
    name = _optional_text(root.get("title"), "title") or default_name
    properties: list[PropertyDefinition] = []
    required: set[str] = set()
    parent_type: str | None = None

    required.update(_parse_required(root.get("required")))
    properties.extend(_parse_properties(root.get("properties")))

    all_of = root.get("allOf")
    if isinstance(all_of, list):
        for clause in all_of:
            if not isinstance(clause, Mapping):
                raise SchemaParseError("allOf clauses must be objects.")
            if "$ref" in clause:
                # last clause wins when several carry a reference
                parent_type = extract_reference_name(_require_reference(clause["$ref"]))
            properties.extend(_parse_properties(clause.get("properties")))
            required.update(_parse_required(clause.get("required")))

    return SchemaModel(
        name=name,
        id=_optional_text(root.get("$id"), "$id"),
        description=_optional_text(root.get("description"), "description"),
        parent_type=parent_type,
        properties=tuple(properties),
        required=frozenset(required),
    )


def _parse_properties(value: Any) -> list[PropertyDefinition]:
    if not isinstance(value, Mapping):
        return []
    return [build_property(str(key), definition) for key, definition in value.items()]


def _parse_required(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    names = []
    for entry in value:
        if isinstance(entry, Mapping | list):
            raise SchemaParseError("required entries must be property names.")
        names.append(entry if isinstance(entry, str) else json.dumps(entry))
    return names


def build_property(name: str, definition: Any) -> PropertyDefinition:
    """Build one property definition, recursing into inline objects and array items."""
    if not isinstance(definition, Mapping):
        raise SchemaParseError(f"Property '{name}' definition must be an object.")

    if "$ref" in definition:
        target = extract_reference_name(_require_reference(definition["$ref"]))
        return PropertyDefinition.reference(name, target)

    kind = _resolve_kind(definition.get("type"))
    nested: tuple[PropertyDefinition, ...] = ()
    items: PropertyDefinition | None = None

    if kind == "object" and isinstance(definition.get("properties"), Mapping):
        nested = tuple(_parse_properties(definition["properties"]))
    if kind == "array" and "items" in definition:
        items = build_property("items", definition["items"])

    return PropertyDefinition(
        name=name,
        kind=kind,
        format=_optional_text(definition.get("format"), f"{name}.format"),
        description=_optional_text(definition.get("description"), f"{name}.description"),
        default_value=_extract_default(definition.get("default")),
        nested_properties=nested,
        items_definition=items,
        enum_values=_extract_enum(definition.get("enum")),
    )


def _resolve_kind(value: Any) -> str:
    if value is None:
        return "string"
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        candidates = [item for item in value if isinstance(item, str) and item != "null"]
        return candidates[0] if candidates else "string"
    raise SchemaParseError(f"Unsupported property type declaration: {value!r}")


def _extract_default(value: Any) -> ScalarValue | None:
    if value is None:
        return None
    if isinstance(value, bool | int | float | str):
        return value
    return json.dumps(value, separators=(",", ":"))


def _extract_enum(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    return tuple(item if isinstance(item, str) else json.dumps(item) for item in value)


def _require_reference(value: Any) -> str:
    if not isinstance(value, str):
        raise SchemaParseError("$ref must be a string.")
    return value


def _optional_text(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool | int | float):
        return json.dumps(value)
    raise SchemaParseError(f"{field_name} must be a string.")
