"""Get materialized preset text use case."""

from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.application.use_cases.preset.materialize_preset import MaterializePresetUseCase
from docbundle.domain.exceptions import NoContentForPreset
from docbundle.domain.value_objects import LATEST


class GetMaterializedUseCase:
    """Serve the text of a preset.

    Distilled presets are answered from their latest artifact; every other
    preset is materialized from the store on each call.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        registry: PresetRegistry,
        materializer: MaterializePresetUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._registry = registry
        self._materializer = materializer

    async def execute(self, preset_key: str) -> str:
        preset = self._registry.get(preset_key)
        if preset.distilled:
            group = preset.groups()[0]
            async with self._uow_factory() as uow:
                artifact = await uow.distilled_artifacts.get(group.name, LATEST)
            if artifact is None:
                raise NoContentForPreset(preset_key)
            return artifact.content

        bundle = await self._materializer.execute(preset)
        if bundle.is_empty:
            raise NoContentForPreset(preset_key)
        return bundle.render(preset.prompt)
