"""Application entry point and composition root."""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from datetime import timedelta

from psycopg_pool import AsyncConnectionPool

from docbundle import __version__
from docbundle.application.services.pipeline import PipelineService
from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.application.use_cases.content.content_stats import ContentStatsUseCase
from docbundle.application.use_cases.content.get_document import GetDocumentUseCase
from docbundle.application.use_cases.content.reconcile_source import ReconcileSourceUseCase
from docbundle.application.use_cases.content.search_documents import SearchDocumentsUseCase
from docbundle.application.use_cases.distillation.get_distilled import (
    GetDistilledUseCase,
    ListDistilledVersionsUseCase,
)
from docbundle.application.use_cases.distillation.job_status import (
    GetDistillationJobUseCase,
    ListDistillationJobsUseCase,
)
from docbundle.application.use_cases.distillation.run_distillation import (
    RunDistillationUseCase,
)
from docbundle.application.use_cases.preset.get_materialized import GetMaterializedUseCase
from docbundle.application.use_cases.preset.materialize_preset import MaterializePresetUseCase
from docbundle.application.use_cases.preset.preset_size import GetPresetSizeUseCase
from docbundle.config import Settings, get_settings
from docbundle.domain.value_objects import PathPattern
from docbundle.infrastructure.github.tarball_ingester import GitHubTarballIngester
from docbundle.infrastructure.inference.openai_batch_provider import OpenAIBatchProvider
from docbundle.infrastructure.persistence.postgres.connection import create_pool
from docbundle.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from docbundle.infrastructure.presets.yaml_loader import load_presets
from docbundle.interfaces.api.app import create_app as create_falcon_app
from docbundle.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from docbundle.interfaces.api.resources.distilled import (
    DistilledResource,
    DistilledVersionsResource,
)
from docbundle.interfaces.api.resources.documents import DocumentResource
from docbundle.interfaces.api.resources.health import HealthResource
from docbundle.interfaces.api.resources.jobs import JobResource, PresetJobsResource
from docbundle.interfaces.api.resources.presets import (
    PresetContentResource,
    PresetSizeResource,
    PresetsResource,
)
from docbundle.interfaces.api.resources.search import SearchResource
from docbundle.interfaces.api.resources.stats import StatsResource

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())
    # Request-level noise from the HTTP clients.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@dataclass
class Container:
    """Everything the entry points need, built once per process."""

    pool: AsyncConnectionPool
    registry: PresetRegistry
    pipeline: PipelineService
    get_materialized: GetMaterializedUseCase
    preset_size: GetPresetSizeUseCase
    list_distillation_jobs: ListDistillationJobsUseCase
    get_distillation_job: GetDistillationJobUseCase
    get_distilled: GetDistilledUseCase
    list_distilled_versions: ListDistilledVersionsUseCase
    get_document: GetDocumentUseCase
    search_documents: SearchDocumentsUseCase
    content_stats: ContentStatsUseCase


def build_container(settings: Settings) -> Container:
    """Composition root - wire adapters into use cases."""
    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool)
    registry = load_presets(settings.presets_file)

    ingester = GitHubTarballIngester(
        base_url=settings.github_api_url,
        token=settings.github_token,
        timeout=settings.github_timeout_seconds,
    )
    provider = OpenAIBatchProvider(
        base_url=settings.inference_api_url,
        api_key=settings.inference_api_key,
    )

    reconciler = ReconcileSourceUseCase(
        unit_of_work_factory=uow_factory,
        ingester=ingester,
        include=[PathPattern(p) for p in settings.sync_include],
        chunk_size=settings.reconcile_chunk_size,
    )
    materializer = MaterializePresetUseCase(unit_of_work_factory=uow_factory)
    distiller = RunDistillationUseCase(
        unit_of_work_factory=uow_factory,
        materializer=materializer,
        provider=provider,
        model=settings.distill_model,
        max_tokens=settings.distill_max_tokens,
        min_length=settings.distill_min_length,
        poll_interval=settings.poll_interval_seconds,
        max_wait=settings.max_wait_seconds,
        status_retries=settings.status_retries,
        status_retry_delay=settings.status_retry_delay_seconds,
    )
    pipeline = PipelineService(
        unit_of_work_factory=uow_factory,
        registry=registry,
        reconciler=reconciler,
        materializer=materializer,
        distiller=distiller,
        max_age=timedelta(hours=settings.max_content_age_hours),
    )

    get_materialized = GetMaterializedUseCase(
        unit_of_work_factory=uow_factory,
        registry=registry,
        materializer=materializer,
    )

    return Container(
        pool=pool,
        registry=registry,
        pipeline=pipeline,
        get_materialized=get_materialized,
        preset_size=GetPresetSizeUseCase(get_materialized),
        list_distillation_jobs=ListDistillationJobsUseCase(
            unit_of_work_factory=uow_factory, registry=registry
        ),
        get_distillation_job=GetDistillationJobUseCase(unit_of_work_factory=uow_factory),
        get_distilled=GetDistilledUseCase(unit_of_work_factory=uow_factory),
        list_distilled_versions=ListDistilledVersionsUseCase(unit_of_work_factory=uow_factory),
        get_document=GetDocumentUseCase(unit_of_work_factory=uow_factory),
        search_documents=SearchDocumentsUseCase(unit_of_work_factory=uow_factory),
        content_stats=ContentStatsUseCase(unit_of_work_factory=uow_factory),
    )


def create_app(settings: Settings | None = None):
    """Build the Falcon ASGI app with all dependencies."""
    settings = settings or get_settings()
    c = build_container(settings)
    return create_falcon_app(
        health_resource=HealthResource(),
        presets_resource=PresetsResource(c.registry),
        preset_content_resource=PresetContentResource(c.get_materialized),
        preset_size_resource=PresetSizeResource(c.preset_size),
        preset_jobs_resource=PresetJobsResource(c.list_distillation_jobs),
        job_resource=JobResource(c.get_distillation_job),
        distilled_resource=DistilledResource(c.get_distilled),
        distilled_versions_resource=DistilledVersionsResource(c.list_distilled_versions),
        document_resource=DocumentResource(c.get_document),
        search_resource=SearchResource(c.search_documents),
        stats_resource=StatsResource(c.content_stats),
        middleware=[PoolLifespanMiddleware(c.pool)],
    )


def run_server(settings: Settings) -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


async def run_sync(settings: Settings, force: bool = False) -> int:
    """Scheduler trigger: reconcile stale sources and check non-distilled presets."""
    c = build_container(settings)
    await c.pool.open()
    try:
        report = await c.pipeline.sync_if_stale(force=force)
    finally:
        await c.pool.close()
    return 0 if report.ok else 1


async def run_distill(settings: Settings, force: bool = False) -> int:
    """Scheduler trigger: distill every distillation-eligible preset with changed content."""
    c = build_container(settings)
    await c.pool.open()
    try:
        report = await c.pipeline.distill(force=force)
    finally:
        await c.pool.close()
    for job in report.jobs:
        logger.info(
            "Job %s (%s): %s, %d/%d distilled",
            job.id,
            job.preset_key,
            job.status,
            job.successful_files,
            job.total_files,
        )
    return 0 if report.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docbundle", description="Documentation bundle service")
    parser.add_argument("--version", action="version", version=f"docbundle {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("serve", help="Run the HTTP read interface")
    sync = sub.add_parser("sync", help="Reconcile stale sources and materialize presets")
    sync.add_argument("--force", action="store_true", help="Reconcile even when content is fresh")
    distill = sub.add_parser("distill", help="Run distillation for distillation-eligible presets")
    distill.add_argument(
        "--force", action="store_true", help="Distill even when content is unchanged since the last job"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("docbundle v%s (%s)", __version__, settings.environment)

    if args.command == "serve":
        run_server(settings)
        return 0
    if args.command == "sync":
        return asyncio.run(run_sync(settings, force=args.force))
    return asyncio.run(run_distill(settings, force=args.force))


if __name__ == "__main__":
    sys.exit(main())
