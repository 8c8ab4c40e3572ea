"""Durable schema cache backed by one file per schema."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

from schema_type_sync.schema_management.schema_models import SchemaModel
from schema_type_sync.schema_management.schema_parser import SchemaParseError, parse_schema

LOGGER = logging.getLogger(__name__)

DEFAULT_SCHEMA_EXTENSION = ".json"

SchemaParser = Callable[[str, str], SchemaModel]

_FORBIDDEN_NAME_CHARS = frozenset({"/", "\\", "\0"})


class CacheIOError(Exception):
    """Raised when a cache file cannot be read, written or deleted."""


def check_schema_name(name: str) -> str:
    """Return ``name`` when it can be used as a file name inside the cache.

    Raises:
      CacheIOError: If the name is empty, a relative path component or
        contains a path separator.
    """
    if not name or name in {".", ".."} or any(char in name for char in _FORBIDDEN_NAME_CHARS):
        raise CacheIOError(f"Invalid schema name: {name!r}")
    return name


class SchemaCache:
    """Raw and parsed schemas keyed by name, persisted to a directory.

    Mutations (save, remove, reload) are serialized so the file written last
    is always the one indexed. Readers only take the index lock and never
    wait on disk access.
    """

    def __init__(
        self,
        cache_directory: Path | str,
        *,
        parser: SchemaParser = parse_schema,
        extension: str = DEFAULT_SCHEMA_EXTENSION,
    ) -> None:
        self._directory = Path(cache_directory)
        self._parser = parser
        self._extension = extension
        self._lock = threading.Lock()
        self._mutation_lock = threading.Lock()
        self._parsed: dict[str, SchemaModel] = {}
        self._raw: dict[str, str] = {}

    @property
    def cache_directory(self) -> Path:
        return self._directory

    def initialize(self) -> None:
        """Create the backing directory and load every schema file found there."""
        LOGGER.info("Initializing schema cache at %s", self._directory)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheIOError(
                f"Cannot create schema cache directory {self._directory}: {exc}"
            ) from exc
        with self._mutation_lock:
            parsed, raw = self._load_directory()
            with self._lock:
                self._parsed = parsed
                self._raw = raw
        LOGGER.info("Schema cache initialized with %d schemas", len(parsed))

    def save(self, name: str, raw_text: str) -> SchemaModel:
        """Parse, persist and index a schema.

        Raises:
          SchemaParseError: If the text is not a usable schema; nothing is changed.
          CacheIOError: If the name is not a plain file name or the backing
            file cannot be written.
        """
        path = self._path_for(name)
        schema = self._parser(name, raw_text)
        with self._mutation_lock:
            try:
                path.write_text(raw_text, encoding="utf-8")
            except OSError as exc:
                raise CacheIOError(f"Failed to write schema file {path}: {exc}") from exc
            with self._lock:
                self._parsed[name] = schema
                self._raw[name] = raw_text
        LOGGER.info("Saved schema %s to %s", name, path)
        return schema

    def remove(self, name: str) -> None:
        """Delete a schema file and drop it from the index; absent names are ignored."""
        path = self._path_for(name)
        with self._mutation_lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise CacheIOError(f"Failed to delete schema file {path}: {exc}") from exc
            with self._lock:
                self._parsed.pop(name, None)
                self._raw.pop(name, None)
        LOGGER.info("Removed schema %s", name)

    def get(self, name: str) -> SchemaModel | None:
        with self._lock:
            return self._parsed.get(name)

    def get_raw(self, name: str) -> str | None:
        with self._lock:
            return self._raw.get(name)

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._parsed

    def count(self) -> int:
        with self._lock:
            return len(self._parsed)

    def all_parsed(self) -> list[SchemaModel]:
        with self._lock:
            return list(self._parsed.values())

    def all_names(self) -> set[str]:
        with self._lock:
            return set(self._parsed)

    def reload(self) -> set[str]:
        """Rebuild the index from disk and return names that disappeared.

        Files deleted behind the cache's back are detected on the next
        reload; saves and removals made through the cache never show up.
        """
        with self._mutation_lock:
            previous_names = self.all_names()
            parsed, raw = self._load_directory()
            with self._lock:
                self._parsed = parsed
                self._raw = raw
        removed = previous_names - set(parsed)
        if removed:
            LOGGER.info("Detected %d deleted schemas: %s", len(removed), sorted(removed))
        LOGGER.info("Reloaded %d schemas from cache", len(parsed))
        return removed

    def _path_for(self, name: str) -> Path:
        check_schema_name(name)
        return self._directory / f"{name}{self._extension}"

    def _load_directory(self) -> tuple[dict[str, SchemaModel], dict[str, str]]:
        parsed: dict[str, SchemaModel] = {}
        raw: dict[str, str] = {}
        try:
            files = sorted(self._directory.glob(f"*{self._extension}"))
        except OSError as exc:
            LOGGER.error("Failed to read cache directory %s: %s", self._directory, exc)
            return parsed, raw
        for path in files:
            if not path.is_file():
                continue
            name = path.name[: -len(self._extension)]
            try:
                text = path.read_text(encoding="utf-8")
                parsed[name] = self._parser(name, text)
            except (OSError, UnicodeDecodeError, SchemaParseError) as exc:
                LOGGER.error("Failed to load schema file %s: %s", path, exc)
                continue
            raw[name] = text
            LOGGER.debug("Loaded schema %s from %s", name, path)
        return parsed, raw
