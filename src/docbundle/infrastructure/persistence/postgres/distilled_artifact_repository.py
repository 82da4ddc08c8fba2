"""PostgreSQL distilled artifact repository implementation."""

from psycopg import AsyncConnection

from docbundle.domain.entities import DistilledArtifact

_COLUMNS = "group_name, version, content, size_kb, document_count, created_at, source_job_id"


def _row_to_artifact(r: tuple) -> DistilledArtifact:
    return DistilledArtifact(
        group_name=r[0],
        version=r[1],
        content=r[2],
        size_kb=r[3],
        document_count=r[4],
        created_at=r[5],
        source_job_id=r[6],
    )


class PostgresDistilledArtifactRepository:
    """Distilled artifact repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def upsert(self, artifact: DistilledArtifact) -> DistilledArtifact:
        await self._conn.execute(
            f"INSERT INTO distilled_artifacts ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s) "
            "ON CONFLICT (group_name, version) DO UPDATE SET "
            "content = EXCLUDED.content, size_kb = EXCLUDED.size_kb, "
            "document_count = EXCLUDED.document_count, source_job_id = EXCLUDED.source_job_id, "
            "updated_at = NOW()",
            (
                artifact.group_name,
                artifact.version,
                artifact.content,
                artifact.size_kb,
                artifact.document_count,
                artifact.created_at,
                artifact.source_job_id,
            ),
        )
        return artifact

    async def get(self, group_name: str, version: str) -> DistilledArtifact | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM distilled_artifacts WHERE group_name = %s AND version = %s",
            (group_name, version),
        )
        r = await cur.fetchone()
        return _row_to_artifact(r) if r else None

    async def list_versions(self, group_name: str) -> list[DistilledArtifact]:
        """The latest tag first, then dated versions newest first."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM distilled_artifacts WHERE group_name = %s "
            "ORDER BY (version = 'latest') DESC, version DESC",
            (group_name,),
        )
        return [_row_to_artifact(r) for r in await cur.fetchall()]
