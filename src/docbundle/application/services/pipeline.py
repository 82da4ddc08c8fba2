"""Pipeline service: the two scheduler entry points."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from docbundle.application.dto import PresetDefinition, ReconcileResult
from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.application.use_cases.content.reconcile_source import ReconcileSourceUseCase
from docbundle.application.use_cases.distillation.run_distillation import (
    RunDistillationUseCase,
)
from docbundle.application.use_cases.preset.materialize_preset import MaterializePresetUseCase
from docbundle.domain.entities import DistillationJob
from docbundle.domain.exceptions import DocBundleError
from docbundle.domain.services import is_stale
from docbundle.domain.services.staleness import DEFAULT_MAX_AGE
from docbundle.domain.value_objects import JobStatus, Source

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Outcome of one sync_if_stale run."""

    reconciled: dict[str, ReconcileResult] = field(default_factory=dict)
    fresh: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    materialized: dict[str, int] = field(default_factory=dict)
    empty_presets: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.empty_presets


@dataclass
class DistillReport:
    """Outcome of one distill run."""

    jobs: list[DistillationJob] = field(default_factory=list)
    current: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed and all(j.status == JobStatus.COMPLETED for j in self.jobs)


class PipelineService:
    """Owns the reconcile/materialize and distill triggers.

    Built once by the composition root; holds no state between calls, so both
    entry points can be invoked repeatedly.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        registry: PresetRegistry,
        reconciler: ReconcileSourceUseCase,
        materializer: MaterializePresetUseCase,
        distiller: RunDistillationUseCase,
        max_age: timedelta = DEFAULT_MAX_AGE,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._registry = registry
        self._reconciler = reconciler
        self._materializer = materializer
        self._distiller = distiller
        self._max_age = max_age

    async def _is_stale(self, source: Source, now: datetime) -> bool:
        async with self._uow_factory() as uow:
            last = await uow.documents.last_synced_at(source)
        return is_stale(last, now, self._max_age)

    async def _sync_source(self, source: Source, force: bool, report: SyncReport) -> None:
        if not force and not await self._is_stale(source, datetime.now(UTC)):
            logger.info("Source %s is fresh, skipping", source)
            report.fresh.append(source.key)
            return
        try:
            report.reconciled[source.key] = await self._reconciler.execute(source)
        except DocBundleError as e:
            logger.error("Sync of %s failed: %s", source, e)
            report.failed[source.key] = str(e)

    async def sync_if_stale(self, force: bool = False) -> SyncReport:
        """Reconcile stale sources, then check every non-distilled preset has content."""
        report = SyncReport()
        presets = self._registry.non_distilled()
        sources = self._registry.sources(presets)
        await asyncio.gather(*(self._sync_source(s, force, report) for s in sources))

        for preset in presets:
            if preset.source.key in report.failed:
                continue
            bundle = await self._materializer.execute(preset)
            if bundle.is_empty:
                logger.warning("Preset %s materialized no content", preset.key)
                report.empty_presets.append(preset.key)
            else:
                report.materialized[preset.key] = len(bundle)
        logger.info(
            "Sync finished: %d reconciled, %d fresh, %d failed, %d presets empty",
            len(report.reconciled),
            len(report.fresh),
            len(report.failed),
            len(report.empty_presets),
        )
        return report

    async def _is_distilled(self, preset: PresetDefinition) -> bool:
        """True when the latest completed job started after the source's last sync."""
        async with self._uow_factory() as uow:
            synced = await uow.documents.last_synced_at(preset.source)
            jobs = await uow.distillation_jobs.list_for_preset(preset.key)
        if synced is None:
            return False
        completed = [j for j in jobs if j.status == JobStatus.COMPLETED]
        return bool(completed) and completed[0].created_at >= synced

    async def distill(self, force: bool = False) -> DistillReport:
        """Run each distillation-eligible preset whose content changed as its own task."""
        report = DistillReport()
        presets = []
        for preset in self._registry.distilled():
            if not force and await self._is_distilled(preset):
                logger.info("Preset %s already distilled from current content, skipping", preset.key)
                report.current.append(preset.key)
            else:
                presets.append(preset)
        outcomes = await asyncio.gather(
            *(self._distiller.execute(p) for p in presets), return_exceptions=True
        )
        for preset, outcome in zip(presets, outcomes):
            if isinstance(outcome, DocBundleError):
                logger.error("Distillation of %s did not start: %s", preset.key, outcome)
                report.failed[preset.key] = str(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                report.jobs.append(outcome)
        return report
