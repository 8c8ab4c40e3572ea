"""Schema transport exports."""

from .schema_event_listener import SchemaEventListener, SchemaTransportError, extract_schema_name
from .schema_events import SchemaEvent, SchemaMessageHandler

__all__ = [
    "SchemaEvent",
    "SchemaEventListener",
    "SchemaMessageHandler",
    "SchemaTransportError",
    "extract_schema_name",
]
