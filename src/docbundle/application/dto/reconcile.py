"""Reconciliation DTOs."""

from dataclasses import dataclass


@dataclass
class ReconcileResult:
    """Counts for one reconcile run."""

    upserted: int = 0
    deleted: int = 0
    unchanged: int = 0


@dataclass(frozen=True)
class IngestedFile:
    """One regular file read from a source archive, path relative to the repository root."""

    path: str
    data: bytes
