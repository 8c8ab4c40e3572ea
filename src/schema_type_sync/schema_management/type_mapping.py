"""JSON Schema kind/format to tag data type mapping."""

from __future__ import annotations

from enum import Enum


class TargetType(str, Enum):
    """Scalar data types understood by the target type registry."""

    STRING = "String"
    DATE_TIME = "DateTime"
    INT1 = "Int1"
    INT4 = "Int4"
    INT8 = "Int8"
    FLOAT4 = "Float4"
    FLOAT8 = "Float8"
    BOOLEAN = "Boolean"
    DATASET = "DataSet"


class CompositeKind(Enum):
    """Marker for kinds that must become a separate type instead of a scalar."""

    COMPOSITE = "composite"


COMPOSITE = CompositeKind.COMPOSITE

_STRING_FORMATS: dict[str, TargetType] = {
    "date-time": TargetType.DATE_TIME,
    "datetime": TargetType.DATE_TIME,
    # no date-only type on the target side
    "date": TargetType.DATE_TIME,
    "time": TargetType.STRING,
    "byte": TargetType.INT1,
    # binary payloads travel as pre-encoded text
    "binary": TargetType.STRING,
}

_NUMBER_FORMATS: dict[str, TargetType] = {
    "float": TargetType.FLOAT4,
    "double": TargetType.FLOAT8,
    "int32": TargetType.INT4,
    "int": TargetType.INT4,
    "int64": TargetType.INT8,
    "long": TargetType.INT8,
}


def map_scalar(kind: str | None, format_hint: str | None) -> TargetType | CompositeKind:
    """Return the target data type for a JSON Schema kind and optional format.

    Objects map to ``COMPOSITE``; callers synthesize a nested type for them.
    Unknown or missing kinds fall back to ``String``.
    """
    if kind is None:
        return TargetType.STRING

    normalized_kind = kind.lower()
    normalized_format = format_hint.lower() if format_hint else None

    if normalized_kind == "string":
        if normalized_format is None:
            return TargetType.STRING
        return _STRING_FORMATS.get(normalized_format, TargetType.STRING)
    if normalized_kind == "integer":
        return TargetType.INT4
    if normalized_kind == "number":
        if normalized_format is None:
            return TargetType.FLOAT8
        return _NUMBER_FORMATS.get(normalized_format, TargetType.FLOAT8)
    if normalized_kind == "boolean":
        return TargetType.BOOLEAN
    if normalized_kind == "array":
        return TargetType.DATASET
    if normalized_kind == "object":
        return COMPOSITE
    return TargetType.STRING


def is_nested_kind(kind: str | None) -> bool:
    """Return True when the kind becomes a nested type."""
    return kind is not None and kind.lower() == "object"


def is_array_kind(kind: str | None) -> bool:
    return kind is not None and kind.lower() == "array"
