"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import OperationalError
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from docbundle.domain.exceptions import StoreUnavailable
from docbundle.infrastructure.persistence.postgres.distillation_job_repository import (
    PostgresDistillationJobRepository,
)
from docbundle.infrastructure.persistence.postgres.distillation_result_repository import (
    PostgresDistillationResultRepository,
)
from docbundle.infrastructure.persistence.postgres.distilled_artifact_repository import (
    PostgresDistilledArtifactRepository,
)
from docbundle.infrastructure.persistence.postgres.document_repository import (
    PostgresDocumentRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._documents = PostgresDocumentRepository(self._conn)
        self._distillation_jobs = PostgresDistillationJobRepository(self._conn)
        self._distillation_results = PostgresDistillationResultRepository(self._conn)
        self._distilled_artifacts = PostgresDistilledArtifactRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def documents(self) -> PostgresDocumentRepository:
        return self._documents

    @property
    def distillation_jobs(self) -> PostgresDistillationJobRepository:
        return self._distillation_jobs

    @property
    def distillation_results(self) -> PostgresDistillationResultRepository:
        return self._distillation_results

    @property
    def distilled_artifacts(self) -> PostgresDistilledArtifactRepository:
        return self._distilled_artifacts

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager).

    Connection-level failures surface as StoreUnavailable.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        try:
            async with PostgresUnitOfWork(pool) as uow:
                try:
                    yield uow
                    await uow.commit()
                except BaseException:
                    await uow.rollback()
                    raise
        except (OperationalError, PoolTimeout) as e:
            raise StoreUnavailable(f"Document store unavailable: {e}") from e

    return factory
