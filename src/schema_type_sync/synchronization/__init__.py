"""Synchronization exports."""

from .reconciliation import PeriodicReconciliation, ReconciliationOutcome, reconcile_once
from .type_synchronizer import DEFAULT_CONTAINER_PATH, DEFAULT_TIMEOUT_SECONDS, TypeSynchronizer

__all__ = [
    "DEFAULT_CONTAINER_PATH",
    "DEFAULT_TIMEOUT_SECONDS",
    "PeriodicReconciliation",
    "ReconciliationOutcome",
    "TypeSynchronizer",
    "reconcile_once",
]
