"""Fixtures for API tests."""

from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from docbundle.application.dto import PresetDefinition
from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.application.use_cases.content.content_stats import ContentStatsUseCase
from docbundle.application.use_cases.content.get_document import GetDocumentUseCase
from docbundle.application.use_cases.content.search_documents import SearchDocumentsUseCase
from docbundle.application.use_cases.distillation.get_distilled import (
    GetDistilledUseCase,
    ListDistilledVersionsUseCase,
)
from docbundle.application.use_cases.distillation.job_status import (
    GetDistillationJobUseCase,
    ListDistillationJobsUseCase,
)
from docbundle.application.use_cases.preset.get_materialized import GetMaterializedUseCase
from docbundle.application.use_cases.preset.materialize_preset import MaterializePresetUseCase
from docbundle.application.use_cases.preset.preset_size import GetPresetSizeUseCase
from docbundle.domain.entities import DistillationJob, DistillationResult, DistilledArtifact
from docbundle.domain.value_objects import JobStatus, PathPattern
from docbundle.interfaces.api.app import create_app
from docbundle.interfaces.api.resources.distilled import DistilledResource, DistilledVersionsResource
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

from tests.conftest import SOURCE, make_document

JOB_ID = UUID("7b0c2f4e-5d1a-4c3b-9e8f-1a2b3c4d5e6f")

PRESETS = [
    PresetDefinition(
        key="docs",
        title="Docs",
        description="All docs",
        source=SOURCE,
        include=((PathPattern("docs/**/*.md"),),),
        display_prefix="docs/",
        prompt="Be brief.",
    ),
    PresetDefinition(
        key="blog",
        title="Blog",
        source=SOURCE,
        include=((PathPattern("blog/**/*.md"),),),
    ),
    PresetDefinition(
        key="docs-distilled",
        title="Docs (distilled)",
        source=SOURCE,
        include=((PathPattern("docs/**/*.md"),),),
        distilled=True,
    ),
]


@pytest.fixture
def seeded_uow(fake_uow):
    """Store with two docs, one distilled artifact and the job that produced it."""
    fake_uow.documents.add(
        make_document("docs/index.md", "# Home", metadata={"title": "Home"}),
        make_document("docs/guide/routing.md", "# Routing", metadata={"title": "Routing"}),
    )
    artifact = DistilledArtifact(
        group_name="docs-distilled",
        version="latest",
        content="## index.md\n\nshort",
        size_kb=1,
        document_count=1,
        created_at=datetime(2025, 5, 1, tzinfo=UTC),
        source_job_id=uuid4(),
    )
    fake_uow.distilled_artifacts._by_key[("docs-distilled", "latest")] = artifact
    fake_uow.distilled_artifacts._by_key[("docs-distilled", "2025-05-01")] = DistilledArtifact(
        **{**artifact.__dict__, "version": "2025-05-01"}
    )
    job = DistillationJob(
        id=JOB_ID,
        preset_key="docs-distilled",
        model="m",
        status=JobStatus.COMPLETED,
        total_files=2,
        processed_files=2,
        successful_files=1,
        created_at=datetime(2025, 5, 1, tzinfo=UTC),
    )
    fake_uow.distillation_jobs._by_id[JOB_ID] = job
    fake_uow.distillation_results._rows.extend(
        DistillationResult(
            id=uuid4(),
            job_id=JOB_ID,
            path=path,
            original_content="x",
            prompt_used="p",
            success=success,
            created_at=job.created_at,
        )
        for path, success in [("docs/index.md", True), ("docs/guide/routing.md", False)]
    )
    return fake_uow


@pytest.fixture
def app(uow_factory, seeded_uow):
    """Falcon ASGI app wired to in-memory fakes."""
    registry = PresetRegistry(PRESETS)
    materializer = MaterializePresetUseCase(unit_of_work_factory=uow_factory)
    get_materialized = GetMaterializedUseCase(uow_factory, registry, materializer)
    return create_app(
        health_resource=HealthResource(),
        presets_resource=PresetsResource(registry),
        preset_content_resource=PresetContentResource(get_materialized),
        preset_size_resource=PresetSizeResource(GetPresetSizeUseCase(get_materialized)),
        preset_jobs_resource=PresetJobsResource(ListDistillationJobsUseCase(uow_factory, registry)),
        job_resource=JobResource(GetDistillationJobUseCase(uow_factory)),
        distilled_resource=DistilledResource(GetDistilledUseCase(uow_factory)),
        distilled_versions_resource=DistilledVersionsResource(ListDistilledVersionsUseCase(uow_factory)),
        document_resource=DocumentResource(GetDocumentUseCase(uow_factory)),
        search_resource=SearchResource(SearchDocumentsUseCase(uow_factory)),
        stats_resource=StatsResource(ContentStatsUseCase(uow_factory)),
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
