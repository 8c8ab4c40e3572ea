"""Target type registry contracts."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class TargetApplyFailure(Exception):
    """Raised when the registry rejects an apply/remove call or it times out."""


class TargetUnavailable(Exception):
    """Raised when the registry cannot be reached at all."""


class CollisionPolicy(str, Enum):
    """How an import treats a type that already exists under the same name."""

    OVERWRITE = "Overwrite"
    MERGE_OVERWRITE = "MergeOverwrite"
    ABORT = "Abort"
    IGNORE = "Ignore"


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of one item in a registry apply/remove batch."""

    name: str
    good: bool
    detail: str = ""

    @staticmethod
    def ok(name: str, detail: str = "") -> ApplyResult:
        return ApplyResult(name=name, good=True, detail=detail)

    @staticmethod
    def bad(name: str, detail: str) -> ApplyResult:
        return ApplyResult(name=name, good=False, detail=detail)


def all_good(results: Sequence[ApplyResult]) -> bool:
    """A batch succeeds only when every item result is good."""
    return all(result.good for result in results)


class TypeRegistry(Protocol):
    """Operations accepted by the target type registry."""

    def apply_definitions(
        self,
        container_path: str,
        artifacts_json: str,
        collision_policy: CollisionPolicy,
    ) -> Future[list[ApplyResult]]: ...

    def remove_definitions(
        self, container_path: str, names: Sequence[str]
    ) -> Future[list[ApplyResult]]: ...
