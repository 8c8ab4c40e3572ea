"""Schema transport entities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class SchemaEvent:
    """A schema arrival or deletion signal for one schema name."""

    name: str
    payload: str

    @property
    def is_deletion(self) -> bool:
        """Empty or whitespace-only payloads mean the schema should be deleted."""
        return not self.payload.strip()


class SchemaMessageHandler(Protocol):
    """Receiver of schema events delivered by the transport."""

    def on_schema_received(self, name: str, raw_text: str) -> None: ...

    def on_schema_deleted(self, name: str) -> None: ...
