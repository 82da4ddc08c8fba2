"""PostgreSQL distillation result repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from docbundle.domain.entities import DistillationResult


class PostgresDistillationResultRepository:
    """Append-only result rows."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def create_batch(self, results: list[DistillationResult]) -> None:
        if not results:
            return
        async with self._conn.cursor() as cur:
            await cur.executemany(
                "INSERT INTO distillation_results (id, job_id, path, original_content, "
                "distilled_content, prompt_used, success, error_message, input_tokens, "
                "output_tokens, created_at) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                [
                    (
                        r.id,
                        r.job_id,
                        r.path,
                        r.original_content,
                        r.distilled_content,
                        r.prompt_used,
                        r.success,
                        r.error_message,
                        r.input_tokens,
                        r.output_tokens,
                        r.created_at,
                    )
                    for r in results
                ],
            )

    async def list_for_job(self, job_id: UUID) -> list[DistillationResult]:
        cur = await self._conn.execute(
            "SELECT id, job_id, path, original_content, distilled_content, prompt_used, "
            "success, error_message, input_tokens, output_tokens, created_at "
            "FROM distillation_results WHERE job_id = %s ORDER BY created_at, path",
            (job_id,),
        )
        return [
            DistillationResult(
                id=r[0],
                job_id=r[1],
                path=r[2],
                original_content=r[3],
                distilled_content=r[4],
                prompt_used=r[5],
                success=r[6],
                error_message=r[7],
                input_tokens=r[8],
                output_tokens=r[9],
                created_at=r[10],
            )
            for r in await cur.fetchall()
        ]
