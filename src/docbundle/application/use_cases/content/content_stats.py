"""Content statistics use case."""

from docbundle.application.dto import SourceStats


class ContentStatsUseCase:
    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self) -> list[SourceStats]:
        async with self._uow_factory() as uow:
            return await uow.documents.stats()
