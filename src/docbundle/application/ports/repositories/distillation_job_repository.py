"""Distillation job repository port."""

from typing import Protocol
from uuid import UUID

from docbundle.domain.entities import DistillationJob


class DistillationJobRepository(Protocol):
    """Port for distillation job persistence."""

    async def create(self, job: DistillationJob) -> DistillationJob: ...

    async def get(self, job_id: UUID) -> DistillationJob | None: ...

    async def update(self, job: DistillationJob) -> DistillationJob: ...

    async def list_for_preset(self, preset_key: str, limit: int = 20) -> list[DistillationJob]: ...
