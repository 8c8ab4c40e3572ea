"""Type definition artifact entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from schema_type_sync.schema_management.schema_models import ScalarValue

UDT_TYPE_MARKER = "UdtType"
MEMORY_VALUE_SOURCE = "memory"
READ_ONLY_ACCESS = "Read_Only"


class MemberKind(str, Enum):
    """Member flavours of a type definition."""

    INSTANCE = "UdtInstance"
    LEAF = "AtomicTag"


@dataclass(frozen=True)
class MemberDefinition:
    """One member of a type definition artifact."""

    name: str
    kind: MemberKind
    tooltip: str | None = None
    type_id: str | None = None
    data_type: str | None = None
    value: ScalarValue | None = None
    read_only: bool = False

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"name": self.name}
        if self.tooltip:
            wire["tooltip"] = self.tooltip
        wire["tagType"] = self.kind.value
        if self.kind is MemberKind.INSTANCE:
            wire["typeId"] = self.type_id
            return wire
        wire["valueSource"] = MEMORY_VALUE_SOURCE
        wire["dataType"] = self.data_type
        if self.value is not None:
            wire["value"] = self.value
        if self.read_only:
            wire["readPermissions"] = {"accessRights": READ_ONLY_ACCESS}
        return wire


@dataclass(frozen=True)
class TypeArtifact:
    """Declarative type definition for one schema or synthesized nested type."""

    name: str
    members: tuple[MemberDefinition, ...]
    documentation: str | None = None
    base_type: str | None = None
    synthesized: bool = False

    def to_wire(self) -> dict[str, Any]:
        """Return the registry import document for this artifact."""
        wire: dict[str, Any] = {"name": self.name, "tagType": UDT_TYPE_MARKER}
        if self.documentation:
            wire["documentation"] = self.documentation
        if self.base_type:
            wire["typeId"] = self.base_type
        wire["tags"] = [member.to_wire() for member in self.members]
        return wire
