"""Document repository port."""

from datetime import datetime
from typing import Protocol

from docbundle.application.dto import SourceStats
from docbundle.domain.entities import Document
from docbundle.domain.value_objects import Source


class DocumentRepository(Protocol):
    """Port for current-content document persistence, keyed by (source, path)."""

    async def get(self, source: Source, path: str) -> Document | None: ...

    async def list_by_source(self, source: Source) -> list[Document]: ...

    async def list_hashes(self, source: Source) -> dict[str, str]: ...

    async def upsert_many(self, documents: list[Document]) -> int: ...

    async def delete_paths(self, source: Source, paths: list[str]) -> int: ...

    async def mark_synced(self, source: Source, at: datetime) -> None: ...

    async def last_synced_at(self, source: Source) -> datetime | None: ...

    async def search(
        self,
        query: str,
        *,
        source: Source | None = None,
        path_prefix: str | None = None,
        limit: int = 50,
    ) -> list[Document]: ...

    async def stats(self) -> list[SourceStats]: ...
