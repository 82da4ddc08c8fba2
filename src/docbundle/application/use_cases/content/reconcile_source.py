"""Reconcile source use case."""

import asyncio
import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from docbundle.application.dto import IngestedFile, ReconcileResult
from docbundle.application.ports import ArchiveIngester
from docbundle.domain.entities import Document
from docbundle.domain.exceptions import ReconciliationAborted
from docbundle.domain.services import extract_frontmatter
from docbundle.domain.value_objects import ContentHash, PathPattern, Source, matches_any

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 100


def _chunks(items: Sequence, size: int):
    for start in range(0, len(items), size):
        yield items[start : start + size]


class ReconcileSourceUseCase:
    """Bring the stored corpus of a source in line with its current archive."""

    def __init__(
        self,
        unit_of_work_factory: type,
        ingester: ArchiveIngester,
        include: Sequence[PathPattern],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._uow_factory = unit_of_work_factory
        self._ingester = ingester
        self._include = tuple(include)
        self._chunk_size = chunk_size

    def _matches(self, path: str) -> bool:
        return matches_any(path, self._include)

    def _scan(
        self, source: Source, stored: dict[str, str], now: datetime
    ) -> tuple[list[Document], set[str], int]:
        """Read the archive once, keeping only new or changed files in memory."""
        changed: list[Document] = []
        seen: set[str] = set()
        unchanged = 0
        for item in self._ingester.ingest(source, self._matches):
            seen.add(item.path)
            content = item.data.decode("utf-8", errors="replace")
            digest = ContentHash.of(content).value
            if stored.get(item.path) == digest:
                unchanged += 1
                continue
            changed.append(self._to_document(source, item, content, digest, now))
        return changed, seen, unchanged

    @staticmethod
    def _to_document(
        source: Source, item: IngestedFile, content: str, digest: str, now: datetime
    ) -> Document:
        return Document(
            source=source,
            path=item.path,
            content=content,
            size_bytes=len(item.data),
            content_hash=digest,
            last_synced_at=now,
            metadata=extract_frontmatter(content),
        )

    async def execute(self, source: Source) -> ReconcileResult:
        """Reconcile one source. Upserts are applied before deletions."""
        now = datetime.now(UTC)
        async with self._uow_factory() as uow:
            stored = await uow.documents.list_hashes(source)

        changed, seen, unchanged = await asyncio.to_thread(self._scan, source, stored, now)
        stale_paths = sorted(set(stored) - seen)
        result = ReconcileResult(unchanged=unchanged)
        logger.info(
            "Scanned %s: %d changed, %d unchanged, %d to delete",
            source,
            len(changed),
            unchanged,
            len(stale_paths),
        )

        try:
            for chunk in _chunks(changed, self._chunk_size):
                async with self._uow_factory() as uow:
                    await uow.documents.upsert_many(list(chunk))
                result.upserted += len(chunk)
            for chunk in _chunks(stale_paths, self._chunk_size):
                async with self._uow_factory() as uow:
                    await uow.documents.delete_paths(source, list(chunk))
                result.deleted += len(chunk)
            async with self._uow_factory() as uow:
                await uow.documents.mark_synced(source, now)
        except Exception as e:
            logger.error(
                "Reconcile of %s aborted after %d upserts, %d deletions",
                source,
                result.upserted,
                result.deleted,
                exc_info=True,
            )
            raise ReconciliationAborted(f"Reconcile of {source} aborted: {e}", result) from e

        logger.info(
            "Reconciled %s: %d upserted, %d deleted, %d unchanged",
            source,
            result.upserted,
            result.deleted,
            result.unchanged,
        )
        return result
