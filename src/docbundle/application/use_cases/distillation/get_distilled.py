"""Get distilled artifact use cases."""

from docbundle.domain.entities import DistilledArtifact
from docbundle.domain.exceptions import NotFound
from docbundle.domain.value_objects import VersionTag


class GetDistilledUseCase:
    """Get one distilled artifact by group name and version tag."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, group_name: str, version: str | None = None) -> DistilledArtifact:
        tag = VersionTag.parse(version)
        async with self._uow_factory() as uow:
            artifact = await uow.distilled_artifacts.get(group_name, tag.value)
        if artifact is None:
            raise NotFound("Distilled artifact", f"{group_name}@{tag}")
        return artifact


class ListDistilledVersionsUseCase:
    """List stored versions of a distilled group, newest first."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, group_name: str) -> list[DistilledArtifact]:
        async with self._uow_factory() as uow:
            return await uow.distilled_artifacts.list_versions(group_name)
