"""Pytest fixtures for docbundle tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

import pytest

from docbundle.application.dto import IngestedFile, SourceStats
from docbundle.domain.entities import (
    DistillationJob,
    DistillationResult,
    DistilledArtifact,
    Document,
)
from docbundle.domain.value_objects import ContentHash, Source

SOURCE = Source(owner="acme", repo="docs")


def make_document(
    path: str,
    content: str = "body",
    source: Source = SOURCE,
    metadata: dict | None = None,
    synced_at: datetime | None = None,
) -> Document:
    return Document(
        source=source,
        path=path,
        content=content,
        size_bytes=len(content.encode()),
        content_hash=ContentHash.of(content).value,
        last_synced_at=synced_at or datetime.now(UTC),
        metadata=metadata or {},
    )


# --- Fake repositories ---


class FakeDocumentRepository:
    """In-memory document repository keyed by (source, path)."""

    def __init__(self) -> None:
        self._docs: dict[tuple[str, str], Document] = {}
        self.upsert_calls = 0
        self.fail_on_upsert_call: int | None = None
        self.synced: dict[str, datetime] = {}

    def add(self, *docs: Document) -> None:
        for d in docs:
            self._docs[(d.source.key, d.path)] = d

    def paths(self, source: Source = SOURCE) -> set[str]:
        return {p for (k, p) in self._docs if k == source.key}

    async def get(self, source: Source, path: str) -> Document | None:
        return self._docs.get((source.key, path))

    async def list_by_source(self, source: Source) -> list[Document]:
        docs = [d for (k, _), d in self._docs.items() if k == source.key]
        return sorted(docs, key=lambda d: d.path)

    async def list_hashes(self, source: Source) -> dict[str, str]:
        return {d.path: d.content_hash for d in await self.list_by_source(source)}

    async def upsert_many(self, documents: list[Document]) -> int:
        self.upsert_calls += 1
        if self.fail_on_upsert_call == self.upsert_calls:
            raise RuntimeError("connection lost")
        for d in documents:
            current = self._docs.get((d.source.key, d.path))
            if current is None or current.content_hash != d.content_hash:
                self._docs[(d.source.key, d.path)] = d
        return len(documents)

    async def delete_paths(self, source: Source, paths: list[str]) -> int:
        removed = 0
        for p in paths:
            if self._docs.pop((source.key, p), None) is not None:
                removed += 1
        return removed

    async def mark_synced(self, source: Source, at: datetime) -> None:
        self.synced[source.key] = at
        for key, d in list(self._docs.items()):
            if key[0] == source.key:
                self._docs[key] = replace(d, last_synced_at=at)

    async def last_synced_at(self, source: Source) -> datetime | None:
        return self.synced.get(source.key)

    async def search(
        self,
        query: str,
        *,
        source: Source | None = None,
        path_prefix: str | None = None,
        limit: int = 50,
    ) -> list[Document]:
        q = query.casefold()
        found = []
        for d in self._docs.values():
            if source and d.source != source:
                continue
            if path_prefix and not d.path.startswith(path_prefix):
                continue
            title = d.title.casefold()
            if title == q:
                tier = 0
            elif q in title:
                tier = 1
            elif q in d.path.casefold():
                tier = 2
            else:
                continue
            found.append((tier, d.source.key, d.path, d))
        found.sort(key=lambda f: f[:3])
        return [f[3] for f in found[:limit]]

    async def stats(self) -> list[SourceStats]:
        by_source: dict[str, list[Document]] = {}
        for d in self._docs.values():
            by_source.setdefault(d.source.key, []).append(d)
        return [
            SourceStats(
                owner=docs[0].source.owner,
                repo=docs[0].source.repo,
                file_count=len(docs),
                total_bytes=sum(d.size_bytes for d in docs),
                last_synced_at=self.synced.get(key),
            )
            for key, docs in sorted(by_source.items())
        ]


class FakeDistillationJobRepository:
    """In-memory job repository; keeps a snapshot of every write."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, DistillationJob] = {}
        self.history: list[DistillationJob] = []

    async def create(self, job: DistillationJob) -> DistillationJob:
        self._by_id[job.id] = replace(job)
        self.history.append(replace(job))
        return job

    async def get(self, job_id: UUID) -> DistillationJob | None:
        return self._by_id.get(job_id)

    async def update(self, job: DistillationJob) -> DistillationJob:
        self._by_id[job.id] = replace(job)
        self.history.append(replace(job))
        return job

    async def list_for_preset(self, preset_key: str, limit: int = 20) -> list[DistillationJob]:
        jobs = [j for j in self._by_id.values() if j.preset_key == preset_key]
        return sorted(jobs, key=lambda j: j.created_at, reverse=True)[:limit]


class FakeDistillationResultRepository:
    def __init__(self) -> None:
        self._rows: list[DistillationResult] = []

    async def create_batch(self, results: list[DistillationResult]) -> None:
        self._rows.extend(results)

    async def list_for_job(self, job_id: UUID) -> list[DistillationResult]:
        return [r for r in self._rows if r.job_id == job_id]


class FakeDistilledArtifactRepository:
    def __init__(self) -> None:
        self._by_key: dict[tuple[str, str], DistilledArtifact] = {}

    async def upsert(self, artifact: DistilledArtifact) -> DistilledArtifact:
        self._by_key[(artifact.group_name, artifact.version)] = artifact
        return artifact

    async def get(self, group_name: str, version: str) -> DistilledArtifact | None:
        return self._by_key.get((group_name, version))

    async def list_versions(self, group_name: str) -> list[DistilledArtifact]:
        items = [a for (g, _), a in self._by_key.items() if g == group_name]
        latest = [a for a in items if a.version == "latest"]
        dated = sorted((a for a in items if a.version != "latest"), key=lambda a: a.version, reverse=True)
        return latest + dated


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.documents = FakeDocumentRepository()
        self.distillation_jobs = FakeDistillationJobRepository()
        self.distillation_results = FakeDistillationResultRepository()
        self.distilled_artifacts = FakeDistilledArtifactRepository()

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


class FakeIngester:
    """Archive ingester over an in-memory {path: bytes} snapshot."""

    def __init__(self, files: dict[str, bytes] | None = None) -> None:
        self.files = dict(files or {})
        self.error: Exception | None = None

    def ingest(self, source: Source, matcher: Callable[[str], bool]) -> Iterator[IngestedFile]:
        if self.error is not None:
            raise self.error
        for path, data in self.files.items():
            if matcher(path):
                yield IngestedFile(path=path, data=data)


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow):
    """Factory yielding the test's FakeUnitOfWork, so state persists across calls."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield fake_uow

    return _factory


@pytest.fixture
def fake_ingester() -> FakeIngester:
    return FakeIngester()
