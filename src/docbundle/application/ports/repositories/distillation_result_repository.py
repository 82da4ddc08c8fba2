"""Distillation result repository port."""

from typing import Protocol
from uuid import UUID

from docbundle.domain.entities import DistillationResult


class DistillationResultRepository(Protocol):
    """Port for append-only per-document distillation results."""

    async def create_batch(self, results: list[DistillationResult]) -> None: ...

    async def list_for_job(self, job_id: UUID) -> list[DistillationResult]: ...
