"""Scalar type mapping tests."""

from __future__ import annotations

import pytest
from schema_type_sync.schema_management import COMPOSITE, TargetType, map_scalar


@pytest.mark.parametrize("format_hint", [None, "int64", "float", "made-up"])
def test_integer_always_maps_to_four_byte_integer(format_hint: str | None) -> None:
    assert map_scalar("integer", format_hint) is TargetType.INT4


@pytest.mark.parametrize(
    ("format_hint", "expected"),
    [
        (None, TargetType.FLOAT8),
        ("float", TargetType.FLOAT4),
        ("double", TargetType.FLOAT8),
        ("int32", TargetType.INT4),
        ("int", TargetType.INT4),
        ("int64", TargetType.INT8),
        ("long", TargetType.INT8),
        ("decimal", TargetType.FLOAT8),
    ],
)
def test_number_formats(format_hint: str | None, expected: TargetType) -> None:
    assert map_scalar("number", format_hint) is expected


@pytest.mark.parametrize(
    ("format_hint", "expected"),
    [
        (None, TargetType.STRING),
        ("date-time", TargetType.DATE_TIME),
        ("datetime", TargetType.DATE_TIME),
        ("date", TargetType.DATE_TIME),
        ("time", TargetType.STRING),
        ("byte", TargetType.INT1),
        ("binary", TargetType.STRING),
        ("email", TargetType.STRING),
    ],
)
def test_string_formats(format_hint: str | None, expected: TargetType) -> None:
    assert map_scalar("string", format_hint) is expected


def test_object_is_composite_whatever_the_format() -> None:
    assert map_scalar("object", None) is COMPOSITE
    assert map_scalar("object", "date-time") is COMPOSITE


def test_remaining_kinds_and_fallbacks() -> None:
    assert map_scalar("boolean", None) is TargetType.BOOLEAN
    assert map_scalar("array", None) is TargetType.DATASET
    assert map_scalar(None, None) is TargetType.STRING
    assert map_scalar("null", None) is TargetType.STRING
    assert map_scalar("geometry", "wkt") is TargetType.STRING


def test_mapping_ignores_case() -> None:
    assert map_scalar("NUMBER", "Float") is TargetType.FLOAT4
    assert map_scalar("String", "DATE-TIME") is TargetType.DATE_TIME


def test_target_types_render_registry_names() -> None:
    assert TargetType.DATE_TIME.value == "DateTime"
    assert TargetType.DATASET.value == "DataSet"
    assert TargetType.FLOAT4 == "Float4"
