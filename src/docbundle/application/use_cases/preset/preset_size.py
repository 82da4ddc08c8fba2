"""Preset size use case."""

from docbundle.application.use_cases.preset.get_materialized import GetMaterializedUseCase
from docbundle.domain.exceptions import NoContentForPreset
from docbundle.domain.services import size_kb


class GetPresetSizeUseCase:
    """Size in KB of the text a preset currently serves, or None when it has none yet."""

    def __init__(self, get_materialized: GetMaterializedUseCase) -> None:
        self._get_materialized = get_materialized

    async def execute(self, preset_key: str) -> int | None:
        try:
            text = await self._get_materialized.execute(preset_key)
        except NoContentForPreset:
            return None
        return size_kb(text)
