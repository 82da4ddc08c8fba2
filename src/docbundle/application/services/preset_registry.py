"""In-memory registry of preset definitions."""

from collections.abc import Iterable

from docbundle.application.dto import PresetDefinition
from docbundle.domain.exceptions import PresetNotFound, ValidationError
from docbundle.domain.value_objects import Source


class PresetRegistry:
    """Preset definitions by key, in declaration order."""

    def __init__(self, presets: Iterable[PresetDefinition] = ()) -> None:
        self._by_key: dict[str, PresetDefinition] = {}
        for preset in presets:
            if preset.key in self._by_key:
                raise ValidationError(f"Duplicate preset key: {preset.key}")
            self._by_key[preset.key] = preset

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def get(self, key: str) -> PresetDefinition:
        preset = self._by_key.get(key)
        if preset is None:
            raise PresetNotFound(key)
        return preset

    def all(self) -> list[PresetDefinition]:
        return list(self._by_key.values())

    def distilled(self) -> list[PresetDefinition]:
        return [p for p in self._by_key.values() if p.distilled]

    def non_distilled(self) -> list[PresetDefinition]:
        return [p for p in self._by_key.values() if not p.distilled]

    def sources(self, presets: Iterable[PresetDefinition] | None = None) -> list[Source]:
        """Distinct sources referenced by the given presets (all by default), first-seen order."""
        seen: dict[Source, None] = {}
        for p in self._by_key.values() if presets is None else presets:
            seen.setdefault(p.source, None)
        return list(seen)
