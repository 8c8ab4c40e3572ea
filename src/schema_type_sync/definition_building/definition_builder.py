"""Schema model to type definition compilation service."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from schema_type_sync.schema_management.schema_models import PropertyDefinition, SchemaModel
from schema_type_sync.schema_management.type_mapping import CompositeKind, map_scalar

from .artifact_models import MemberDefinition, MemberKind, TypeArtifact

LOGGER = logging.getLogger(__name__)


def nested_type_name(parent_name: str, property_name: str) -> str:
    """Return the synthesized type name for an inline object property."""
    return f"{parent_name}_{property_name}"


def build_primary_artifact(schema: SchemaModel, *, synthesized: bool = False) -> TypeArtifact:
    """Compile a schema model into its type definition artifact.

    Properties that cannot be mapped are dropped with a warning.
    """
    members: list[MemberDefinition] = []
    for prop in schema.properties:
        member = _build_member(prop, schema.name)
        if member is not None:
            members.append(member)
    return TypeArtifact(
        name=schema.name,
        members=tuple(members),
        documentation=schema.description or None,
        base_type=schema.parent_type or None,
        synthesized=synthesized,
    )


def build_nested_artifacts(schema: SchemaModel) -> list[TypeArtifact]:
    """Synthesize artifacts for every inline object property, depth first.

    Each synthesized type precedes the types synthesized from its own
    children. Callers apply these before the primary artifact.
    """
    artifacts: list[TypeArtifact] = []
    for nested_schema in _nested_schemas(schema):
        artifacts.append(build_primary_artifact(nested_schema, synthesized=True))
        artifacts.extend(build_nested_artifacts(nested_schema))
    return artifacts


def build_all_artifacts(schema: SchemaModel) -> list[TypeArtifact]:
    """Return nested artifacts followed by the primary artifact."""
    return [*build_nested_artifacts(schema), build_primary_artifact(schema)]


def render_artifacts_json(artifacts: Iterable[TypeArtifact]) -> str:
    """Render artifacts as the JSON array accepted by the registry import call."""
    return json.dumps(
        [artifact.to_wire() for artifact in artifacts],
        indent=2,
        ensure_ascii=False,
    )


def _nested_schemas(schema: SchemaModel) -> list[SchemaModel]:
    return [
        SchemaModel(
            name=nested_type_name(schema.name, prop.name),
            description=f"Nested type for {schema.name}.{prop.name}",
            properties=prop.nested_properties,
        )
        for prop in schema.properties
        if prop.is_object and prop.has_nested_properties and not prop.is_reference
    ]


def _build_member(prop: PropertyDefinition, parent_name: str) -> MemberDefinition | None:
    tooltip = prop.description or None

    if prop.is_reference:
        return MemberDefinition(
            name=prop.name,
            kind=MemberKind.INSTANCE,
            tooltip=tooltip,
            type_id=prop.reference_target,
        )

    if prop.is_object and prop.has_nested_properties:
        return MemberDefinition(
            name=prop.name,
            kind=MemberKind.INSTANCE,
            tooltip=tooltip,
            type_id=nested_type_name(parent_name, prop.name),
        )

    data_type = map_scalar(prop.kind, prop.format)
    if isinstance(data_type, CompositeKind):
        LOGGER.warning(
            "Could not map type for property %s.%s (kind=%s); member dropped",
            parent_name,
            prop.name,
            prop.kind,
        )
        return None

    return MemberDefinition(
        name=prop.name,
        kind=MemberKind.LEAF,
        tooltip=tooltip,
        data_type=data_type.value,
        # arrays are plain dataset leaves; element shape is not propagated
        value=None if prop.is_array else prop.default_value,
        read_only=True,
    )
