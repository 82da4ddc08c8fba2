"""Materialize preset use case."""

import logging

from docbundle.application.dto import MaterializedBundle, MaterializedDocument, PresetDefinition
from docbundle.domain.services import minimize, sort_paths
from docbundle.domain.value_objects import matches_any

logger = logging.getLogger(__name__)


class MaterializePresetUseCase:
    """Evaluate a preset against the current store state.

    Include groups are processed in declaration order. A path matched by an
    earlier group is not repeated by a later one, and each group is sorted
    parent-before-child on its own.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, preset: PresetDefinition, apply_minimize: bool = True
    ) -> MaterializedBundle:
        async with self._uow_factory() as uow:
            candidates = await uow.documents.list_by_source(preset.source)

        candidates = [d for d in candidates if not matches_any(d.path, preset.ignore)]
        claimed: set[str] = set()
        out: list[MaterializedDocument] = []
        for group in preset.include:
            matched = [
                d for d in candidates if d.path not in claimed and matches_any(d.path, group)
            ]
            claimed.update(d.path for d in matched)
            for doc in sort_paths(matched, key=lambda d: d.path):
                content = doc.content
                if apply_minimize and preset.minimize is not None:
                    content = minimize(content, preset.minimize)
                out.append(
                    MaterializedDocument(
                        path=doc.path,
                        display_path=preset.display_path(doc.path),
                        content=content,
                    )
                )

        logger.debug("Materialized %s: %d documents", preset.key, len(out))
        return MaterializedBundle(preset_key=preset.key, documents=tuple(out))
