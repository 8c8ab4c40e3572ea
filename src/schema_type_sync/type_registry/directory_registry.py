"""Directory-backed type registry."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

from .registry_contracts import ApplyResult, CollisionPolicy, TargetUnavailable

LOGGER = logging.getLogger(__name__)


class DirectoryTypeRegistry:
    """Registry storing each type definition as ``<root>/<container>/<name>.json``.

    Calls run on a single worker thread and resolve to one result per item,
    mirroring an asynchronous tag provider import.
    """

    def __init__(self, root: Path | str, executor: ThreadPoolExecutor | None = None) -> None:
        self._root = Path(root)
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="type-registry"
        )

    @property
    def root(self) -> Path:
        return self._root

    def apply_definitions(
        self,
        container_path: str,
        artifacts_json: str,
        collision_policy: CollisionPolicy,
    ) -> Future[list[ApplyResult]]:
        container = self._container(container_path)
        return self._executor.submit(
            _import_definitions, container, artifacts_json, collision_policy
        )

    def remove_definitions(
        self, container_path: str, names: Sequence[str]
    ) -> Future[list[ApplyResult]]:
        container = self._container(container_path)
        return self._executor.submit(_remove_definitions, container, tuple(names))

    def definition_names(self, container_path: str) -> list[str]:
        container = self._root / container_path
        if not container.is_dir():
            return []
        return sorted(path.stem for path in container.glob("*.json"))

    def read_definition(self, container_path: str, name: str) -> dict[str, Any] | None:
        path = _definition_path(self._root / container_path, name)
        if path is None or not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _container(self, container_path: str) -> Path:
        container = self._root / container_path
        try:
            container.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise TargetUnavailable(f"Type registry not reachable at {container}: {exc}") from exc
        return container


def _import_definitions(
    container: Path, artifacts_json: str, collision_policy: CollisionPolicy
) -> list[ApplyResult]:
    try:
        parsed = json.loads(artifacts_json)
    except json.JSONDecodeError as exc:
        return [ApplyResult.bad("", f"Invalid definition document: {exc}")]
    documents = parsed if isinstance(parsed, list) else [parsed]
    return [_import_one(container, document, collision_policy) for document in documents]


def _import_one(
    container: Path, document: Any, collision_policy: CollisionPolicy
) -> ApplyResult:
    if not isinstance(document, Mapping) or not isinstance(document.get("name"), str):
        return ApplyResult.bad("", "Type definition requires a name.")
    name = document["name"]
    path = _definition_path(container, name)
    if path is None:
        return ApplyResult.bad(name, "Type name must be a plain file name.")
    exists = path.exists()
    if exists and collision_policy is CollisionPolicy.ABORT:
        return ApplyResult.bad(name, "Type already exists.")
    if exists and collision_policy is CollisionPolicy.IGNORE:
        return ApplyResult.ok(name, "ignored")
    payload = dict(document)
    if exists and collision_policy is CollisionPolicy.MERGE_OVERWRITE:
        payload = _merge_definitions(json.loads(path.read_text(encoding="utf-8")), payload)
    try:
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        return ApplyResult.bad(name, str(exc))
    LOGGER.debug("Stored type definition %s at %s", name, path)
    return ApplyResult.ok(name, "updated" if exists else "created")


def _definition_path(container: Path, name: str) -> Path | None:
    if not name or name in {".", ".."} or "/" in name or "\\" in name or "\0" in name:
        return None
    return container / f"{name}.json"


def _merge_definitions(existing: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    merged = {**existing, **incoming}
    members = {member["name"]: member for member in existing.get("tags", [])}
    members.update({member["name"]: member for member in incoming.get("tags", [])})
    merged["tags"] = list(members.values())
    return merged


def _remove_definitions(container: Path, names: tuple[str, ...]) -> list[ApplyResult]:
    results = []
    for name in names:
        path = _definition_path(container, name)
        if path is None:
            results.append(ApplyResult.bad(name, "Type name must be a plain file name."))
            continue
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            results.append(ApplyResult.bad(name, str(exc)))
            continue
        results.append(ApplyResult.ok(name))
    return results
