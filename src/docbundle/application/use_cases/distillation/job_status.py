"""Distillation job status use cases."""

from uuid import UUID

from docbundle.application.dto import DistillationJobReport
from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.domain.entities import DistillationJob
from docbundle.domain.exceptions import NotFound


async def _report(uow, job: DistillationJob) -> DistillationJobReport:
    results = await uow.distillation_results.list_for_job(job.id)
    return DistillationJobReport(
        job=job,
        failed_paths=sorted(r.path for r in results if not r.success),
    )


class ListDistillationJobsUseCase:
    """Recent jobs of a preset, newest first, with their failed paths."""

    def __init__(self, unit_of_work_factory: type, registry: PresetRegistry) -> None:
        self._uow_factory = unit_of_work_factory
        self._registry = registry

    async def execute(self, preset_key: str, limit: int = 10) -> list[DistillationJobReport]:
        self._registry.get(preset_key)
        async with self._uow_factory() as uow:
            jobs = await uow.distillation_jobs.list_for_preset(preset_key, limit=limit)
            return [await _report(uow, job) for job in jobs]


class GetDistillationJobUseCase:
    """One job by id, with its failed paths."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, job_id: UUID) -> DistillationJobReport:
        async with self._uow_factory() as uow:
            job = await uow.distillation_jobs.get(job_id)
            if job is None:
                raise NotFound("Distillation job", str(job_id))
            return await _report(uow, job)
