"""Run distillation use case."""

import asyncio
import logging
from dataclasses import replace
from datetime import UTC, datetime
from uuid import uuid4

from docbundle.application.dto import MaterializedDocument, PresetDefinition, render_documents
from docbundle.application.ports import (
    BatchOutcome,
    BatchProvider,
    BatchRequest,
    BatchState,
    BatchStatus,
)
from docbundle.application.use_cases.preset.materialize_preset import MaterializePresetUseCase
from docbundle.domain.entities import DistillationJob, DistillationResult, DistilledArtifact
from docbundle.domain.exceptions import (
    BatchTimeout,
    NoContentForPreset,
    PresetNotFound,
    ProviderRejected,
    ProviderUnavailable,
)
from docbundle.domain.services import minimize, size_kb
from docbundle.domain.value_objects import JobStatus, VersionTag

logger = logging.getLogger(__name__)

MISSING_RESULT = "No result returned by provider"


def _custom_id(index: int) -> str:
    return f"doc-{index}"


class RunDistillationUseCase:
    """Condense a distillation-eligible preset through the batch provider.

    Per-document failures are recorded and never fail the job; submission,
    status polling and result retrieval errors mark the job failed.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        materializer: MaterializePresetUseCase,
        provider: BatchProvider,
        *,
        model: str,
        max_tokens: int = 16000,
        min_length: int = 200,
        poll_interval: float = 30.0,
        max_wait: float = 24 * 3600.0,
        status_retries: int = 3,
        status_retry_delay: float = 5.0,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._materializer = materializer
        self._provider = provider
        self._model = model
        self._max_tokens = max_tokens
        self._min_length = min_length
        self._poll_interval = poll_interval
        self._max_wait = max_wait
        self._status_retries = max(1, status_retries)
        self._status_retry_delay = status_retry_delay

    async def execute(self, preset: PresetDefinition) -> DistillationJob:
        if not preset.distilled:
            raise PresetNotFound(preset.key)

        bundle = await self._materializer.execute(preset, apply_minimize=False)
        docs = [d for d in bundle if len(d.content) >= self._min_length]
        if preset.minimize is not None:
            docs = [replace(d, content=minimize(d.content, preset.minimize)) for d in docs]
        if not docs:
            raise NoContentForPreset(preset.key)

        job = DistillationJob(
            id=uuid4(),
            preset_key=preset.key,
            model=self._model,
            status=JobStatus.PENDING,
            total_files=len(docs),
            created_at=datetime.now(UTC),
        )
        async with self._uow_factory() as uow:
            await uow.distillation_jobs.create(job)
        logger.info("Created distillation job %s for %s with %d documents", job.id, preset.key, len(docs))

        try:
            await self._run(job, preset, docs)
        except Exception as e:
            if job.status.is_terminal:
                raise
            logger.error("Distillation job %s failed: %s", job.id, e, exc_info=True)
            job.fail(str(e) or type(e).__name__, datetime.now(UTC))
            await self._save(job)
        return job

    async def _save(self, job: DistillationJob) -> None:
        async with self._uow_factory() as uow:
            await uow.distillation_jobs.update(job)

    async def _run(
        self, job: DistillationJob, preset: PresetDefinition, docs: list[MaterializedDocument]
    ) -> None:
        requests = [
            BatchRequest(
                custom_id=_custom_id(i),
                prompt=preset.distillation_prompt + doc.content,
                model=self._model,
                max_tokens=self._max_tokens,
            )
            for i, doc in enumerate(docs)
        ]
        handle = await self._provider.submit_batch(requests)
        job.mark_processing(handle, datetime.now(UTC))
        await self._save(job)
        logger.info("Job %s processing, batch %s", job.id, handle)

        status = await self._wait_for_batch(job)
        outcomes = await self._provider.fetch_results(status.result_files)
        results = self._record(job, docs, outcomes, preset.distillation_prompt)
        async with self._uow_factory() as uow:
            await uow.distillation_results.create_batch(results)

        distilled = [
            replace(doc, content=result.distilled_content)
            for doc, result in zip(docs, results)
            if result.success
        ]
        await self._write_artifacts(job, preset, distilled)

        job.complete(
            processed=len(results),
            successful=len(distilled),
            input_tokens=sum(r.input_tokens or 0 for r in results),
            output_tokens=sum(r.output_tokens or 0 for r in results),
            at=datetime.now(UTC),
        )
        await self._save(job)
        logger.info(
            "Job %s completed: %d of %d documents distilled",
            job.id,
            job.successful_files,
            job.total_files,
        )

    async def _wait_for_batch(self, job: DistillationJob) -> BatchStatus:
        """Poll at a fixed interval until the batch ends or max_wait elapses."""
        waited = 0.0
        while True:
            status = await self._status_with_retry(job.batch_handle)
            if status.state is BatchState.FAILED:
                raise ProviderRejected(
                    f"Batch {job.batch_handle} failed: {status.error or 'no reason given'}"
                )
            processed = min(status.processed, job.total_files)
            job.record_progress(processed, min(status.completed, processed))
            await self._save(job)
            if status.state is BatchState.ENDED:
                return status
            if waited >= self._max_wait:
                raise BatchTimeout(
                    f"Batch {job.batch_handle} not finished after {self._max_wait:.0f}s"
                )
            logger.info(
                "Batch %s: %d/%d processed", job.batch_handle, processed, job.total_files
            )
            await asyncio.sleep(self._poll_interval)
            waited += self._poll_interval

    async def _status_with_retry(self, handle: str) -> BatchStatus:
        last_error: ProviderUnavailable | None = None
        for attempt in range(1, self._status_retries + 1):
            try:
                return await self._provider.get_batch_status(handle)
            except ProviderUnavailable as e:
                last_error = e
                logger.warning(
                    "Status check for batch %s failed (attempt %d/%d): %s",
                    handle,
                    attempt,
                    self._status_retries,
                    e,
                )
                if attempt < self._status_retries:
                    await asyncio.sleep(self._status_retry_delay)
        raise ProviderUnavailable(
            f"Batch {handle} status unavailable after {self._status_retries} attempts: {last_error}"
        ) from last_error

    def _record(
        self,
        job: DistillationJob,
        docs: list[MaterializedDocument],
        outcomes: list[BatchOutcome],
        prompt: str,
    ) -> list[DistillationResult]:
        by_id = {o.custom_id: o for o in outcomes}
        now = datetime.now(UTC)
        results = []
        for i, doc in enumerate(docs):
            outcome = by_id.get(_custom_id(i))
            ok = outcome is not None and outcome.success and bool(outcome.content)
            if ok:
                error = None
            elif outcome is None:
                error = MISSING_RESULT
            else:
                error = outcome.error or "Empty response"
            results.append(
                DistillationResult(
                    id=uuid4(),
                    job_id=job.id,
                    path=doc.path,
                    original_content=doc.content,
                    prompt_used=prompt,
                    success=ok,
                    created_at=now,
                    distilled_content=outcome.content if ok else None,
                    error_message=error,
                    input_tokens=outcome.input_tokens if outcome else None,
                    output_tokens=outcome.output_tokens if outcome else None,
                )
            )
        return results

    async def _write_artifacts(
        self,
        job: DistillationJob,
        preset: PresetDefinition,
        distilled: list[MaterializedDocument],
    ) -> None:
        now = datetime.now(UTC)
        tags = (VersionTag.latest(), VersionTag.for_date(now.date()))
        for group in preset.groups():
            members = [d for d in distilled if group.includes(d.display_path)]
            if not members:
                logger.warning("Group %s of job %s has no distilled documents", group.name, job.id)
                continue
            body = render_documents(members, preset.prompt)
            async with self._uow_factory() as uow:
                for tag in tags:
                    await uow.distilled_artifacts.upsert(
                        DistilledArtifact(
                            group_name=group.name,
                            version=tag.value,
                            content=body,
                            size_kb=size_kb(body),
                            document_count=len(members),
                            created_at=now,
                            source_job_id=job.id,
                        )
                    )
            logger.info(
                "Stored distilled group %s (%d documents) as %s",
                group.name,
                len(members),
                ", ".join(t.value for t in tags),
            )
