"""PostgreSQL distillation job repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from docbundle.domain.entities import DistillationJob
from docbundle.domain.value_objects import JobStatus

_COLUMNS = (
    "id, preset_key, model, status, total_files, processed_files, successful_files, "
    "total_input_tokens, total_output_tokens, batch_handle, started_at, completed_at, "
    "error_message, created_at"
)


def _row_to_job(r: tuple) -> DistillationJob:
    return DistillationJob(
        id=r[0],
        preset_key=r[1],
        model=r[2],
        status=JobStatus(r[3]),
        total_files=r[4],
        processed_files=r[5],
        successful_files=r[6],
        total_input_tokens=r[7],
        total_output_tokens=r[8],
        batch_handle=r[9],
        started_at=r[10],
        completed_at=r[11],
        error_message=r[12],
        created_at=r[13],
    )


class PostgresDistillationJobRepository:
    """Distillation job repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create(self, job: DistillationJob) -> DistillationJob:
        await self._conn.execute(
            f"INSERT INTO distillation_jobs ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                job.id,
                job.preset_key,
                job.model,
                job.status.value,
                job.total_files,
                job.processed_files,
                job.successful_files,
                job.total_input_tokens,
                job.total_output_tokens,
                job.batch_handle,
                job.started_at,
                job.completed_at,
                job.error_message,
                job.created_at,
            ),
        )
        return job

    async def get(self, job_id: UUID) -> DistillationJob | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM distillation_jobs WHERE id = %s", (job_id,)
        )
        r = await cur.fetchone()
        return _row_to_job(r) if r else None

    async def update(self, job: DistillationJob) -> DistillationJob:
        await self._conn.execute(
            "UPDATE distillation_jobs SET status = %s, processed_files = %s, "
            "successful_files = %s, total_input_tokens = %s, total_output_tokens = %s, "
            "batch_handle = %s, started_at = %s, completed_at = %s, error_message = %s, "
            "updated_at = NOW() WHERE id = %s",
            (
                job.status.value,
                job.processed_files,
                job.successful_files,
                job.total_input_tokens,
                job.total_output_tokens,
                job.batch_handle,
                job.started_at,
                job.completed_at,
                job.error_message,
                job.id,
            ),
        )
        return job

    async def list_for_preset(self, preset_key: str, limit: int = 20) -> list[DistillationJob]:
        """Most recent jobs first."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM distillation_jobs WHERE preset_key = %s "
            "ORDER BY created_at DESC LIMIT %s",
            (preset_key, limit),
        )
        return [_row_to_job(r) for r in await cur.fetchall()]
