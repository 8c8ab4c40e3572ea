"""Type definition building exports."""

from .artifact_models import MemberDefinition, MemberKind, TypeArtifact
from .definition_builder import (
    build_all_artifacts,
    build_nested_artifacts,
    build_primary_artifact,
    nested_type_name,
    render_artifacts_json,
)

__all__ = [
    "MemberDefinition",
    "MemberKind",
    "TypeArtifact",
    "build_all_artifacts",
    "build_nested_artifacts",
    "build_primary_artifact",
    "nested_type_name",
    "render_artifacts_json",
]
