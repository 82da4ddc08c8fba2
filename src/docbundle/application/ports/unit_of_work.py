"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from docbundle.application.ports.repositories import (
    DistillationJobRepository,
    DistillationResultRepository,
    DistilledArtifactRepository,
    DocumentRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - one transaction spanning every repository."""

    @property
    def documents(self) -> DocumentRepository: ...

    @property
    def distillation_jobs(self) -> DistillationJobRepository: ...

    @property
    def distillation_results(self) -> DistillationResultRepository: ...

    @property
    def distilled_artifacts(self) -> DistilledArtifactRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
