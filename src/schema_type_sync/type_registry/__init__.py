"""Target type registry exports."""

from .directory_registry import DirectoryTypeRegistry
from .registry_contracts import (
    ApplyResult,
    CollisionPolicy,
    TargetApplyFailure,
    TargetUnavailable,
    TypeRegistry,
    all_good,
)

__all__ = [
    "ApplyResult",
    "CollisionPolicy",
    "DirectoryTypeRegistry",
    "TargetApplyFailure",
    "TargetUnavailable",
    "TypeRegistry",
    "all_good",
]
