"""Schema management exports."""

from .schema_models import PropertyDefinition, ScalarValue, SchemaModel
from .schema_parser import SchemaParseError, build_property, extract_reference_name, parse_schema
from .type_mapping import COMPOSITE, CompositeKind, TargetType, map_scalar

__all__ = [
    "COMPOSITE",
    "CompositeKind",
    "PropertyDefinition",
    "ScalarValue",
    "SchemaModel",
    "SchemaParseError",
    "TargetType",
    "build_property",
    "extract_reference_name",
    "map_scalar",
    "parse_schema",
]
