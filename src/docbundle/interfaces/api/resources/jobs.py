"""Distillation job status API resources."""

from uuid import UUID

import falcon.asgi

from docbundle.application.dto import DistillationJobReport
from docbundle.application.use_cases.distillation.job_status import (
    GetDistillationJobUseCase,
    ListDistillationJobsUseCase,
)
from docbundle.domain.exceptions import NotFound, PresetNotFound


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _report_to_dict(report: DistillationJobReport) -> dict:
    job = report.job
    return {
        "id": str(job.id),
        "preset_key": job.preset_key,
        "model": job.model,
        "status": str(job.status),
        "total_files": job.total_files,
        "processed_files": job.processed_files,
        "successful_files": job.successful_files,
        "total_input_tokens": job.total_input_tokens,
        "total_output_tokens": job.total_output_tokens,
        "error_message": job.error_message,
        "created_at": job.created_at.isoformat(),
        "started_at": _iso(job.started_at),
        "completed_at": _iso(job.completed_at),
        "failed_paths": report.failed_paths,
    }


class PresetJobsResource:
    """GET /v1/presets/{key}/jobs?limit= - recent distillation jobs of a preset."""

    def __init__(self, list_jobs: ListDistillationJobsUseCase) -> None:
        self._list_jobs = list_jobs

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, key: str) -> None:
        limit = req.get_param_as_int("limit", min_value=1, max_value=100) or 10
        try:
            reports = await self._list_jobs.execute(key, limit=limit)
        except PresetNotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": f"Preset not found: {key}"}
            return
        resp.media = {"preset": key, "items": [_report_to_dict(r) for r in reports]}
        resp.status = falcon.HTTP_200


class JobResource:
    """GET /v1/jobs/{job_id} - one distillation job."""

    def __init__(self, get_job: GetDistillationJobUseCase) -> None:
        self._get_job = get_job

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, job_id: str) -> None:
        try:
            jid = UUID(job_id)
        except ValueError:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Invalid UUID"}
            return
        try:
            report = await self._get_job.execute(jid)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.media = _report_to_dict(report)
        resp.status = falcon.HTTP_200
