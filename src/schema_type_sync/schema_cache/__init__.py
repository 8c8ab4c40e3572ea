"""Schema cache exports."""

from .schema_store import DEFAULT_SCHEMA_EXTENSION, CacheIOError, SchemaCache, check_schema_name

__all__ = [
    "CacheIOError",
    "DEFAULT_SCHEMA_EXTENSION",
    "SchemaCache",
    "check_schema_name",
]
