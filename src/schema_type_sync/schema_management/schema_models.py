"""Schema management entities."""

from __future__ import annotations

from dataclasses import dataclass, field

ScalarValue = bool | int | float | str


@dataclass(frozen=True)
class PropertyDefinition:  # pylint: disable=too-many-instance-attributes
    """One field of a schema, possibly carrying a nested property tree."""

    name: str
    kind: str = "string"
    format: str | None = None
    description: str | None = None
    default_value: ScalarValue | None = None
    reference_target: str | None = None
    nested_properties: tuple[PropertyDefinition, ...] = ()
    items_definition: PropertyDefinition | None = None
    enum_values: tuple[str, ...] | None = None

    @staticmethod
    def reference(name: str, target: str) -> PropertyDefinition:
        return PropertyDefinition(name=name, kind="object", reference_target=target)

    @property
    def is_reference(self) -> bool:
        return bool(self.reference_target)

    @property
    def is_object(self) -> bool:
        return self.kind == "object"

    @property
    def is_array(self) -> bool:
        return self.kind == "array"

    @property
    def has_nested_properties(self) -> bool:
        return bool(self.nested_properties)

    @property
    def has_enum(self) -> bool:
        return bool(self.enum_values)


@dataclass(frozen=True)
class SchemaModel:
    """Parsed representation of one schema document."""

    name: str
    id: str | None = None
    description: str | None = None
    parent_type: str | None = None
    properties: tuple[PropertyDefinition, ...] = ()
    required: frozenset[str] = field(default_factory=frozenset)

    @property
    def has_parent(self) -> bool:
        return bool(self.parent_type)

    def is_required(self, property_name: str) -> bool:
        return property_name in self.required
