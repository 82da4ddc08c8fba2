"""PostgreSQL document repository implementation."""

from datetime import datetime

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from docbundle.application.dto import SourceStats
from docbundle.domain.entities import Document
from docbundle.domain.value_objects import Source

_COLUMNS = "owner, repo, path, content, size_bytes, content_hash, metadata, last_synced_at, created_at"


def _like_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# Mirrors Document.title: front matter title, else filename minus extension and "NN-" prefix.
_TITLE_EXPR = (
    "CASE WHEN jsonb_typeof(metadata->'title') = 'string' AND metadata->>'title' <> '' "
    "THEN metadata->>'title' "
    "ELSE regexp_replace(regexp_replace(regexp_replace(path, '^.*/', ''), "
    "'[.]mdx?$', ''), '^[0-9]+-', '') END"
)


def _search_query(
    query: str,
    source: Source | None,
    path_prefix: str | None,
    limit: int,
) -> tuple[str, tuple]:
    """Build the search SELECT; ranking happens before LIMIT so no tier is cut off."""
    pattern = f"%{_like_escape(query)}%"
    conditions = ["(d.title ILIKE %s OR d.path ILIKE %s)"]
    params: list[object] = [pattern, pattern]
    if source:
        conditions.append("d.owner = %s AND d.repo = %s")
        params.extend([source.owner, source.repo])
    if path_prefix:
        conditions.append("d.path LIKE %s")
        params.append(f"{_like_escape(path_prefix)}%")
    params.extend([query, pattern, limit])
    sql = (
        f"SELECT {_COLUMNS} FROM (SELECT *, {_TITLE_EXPR} AS title FROM documents) d "
        f"WHERE {' AND '.join(conditions)} "
        "ORDER BY CASE WHEN lower(d.title) = lower(%s) THEN 0 "
        "WHEN d.title ILIKE %s THEN 1 ELSE 2 END, d.owner, d.repo, d.path "
        "LIMIT %s"
    )
    return sql, tuple(params)


def _row_to_document(r: tuple) -> Document:
    return Document(
        source=Source(owner=r[0], repo=r[1]),
        path=r[2],
        content=r[3],
        size_bytes=r[4],
        content_hash=r[5],
        metadata=r[6] or {},
        last_synced_at=r[7],
        created_at=r[8],
    )


class PostgresDocumentRepository:
    """Document repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, source: Source, path: str) -> Document | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM documents WHERE owner = %s AND repo = %s AND path = %s",
            (source.owner, source.repo, path),
        )
        r = await cur.fetchone()
        return _row_to_document(r) if r else None

    async def list_by_source(self, source: Source) -> list[Document]:
        """All documents of a source, ordered by path."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM documents WHERE owner = %s AND repo = %s ORDER BY path",
            (source.owner, source.repo),
        )
        return [_row_to_document(r) for r in await cur.fetchall()]

    async def list_hashes(self, source: Source) -> dict[str, str]:
        cur = await self._conn.execute(
            "SELECT path, content_hash FROM documents WHERE owner = %s AND repo = %s",
            (source.owner, source.repo),
        )
        return {r[0]: r[1] for r in await cur.fetchall()}

    async def upsert_many(self, documents: list[Document]) -> int:
        """Insert or update by (owner, repo, path); rows with an equal hash are left alone."""
        if not documents:
            return 0
        async with self._conn.cursor() as cur:
            await cur.executemany(
                "INSERT INTO documents (owner, repo, path, content, size_bytes, content_hash, "
                "metadata, last_synced_at) VALUES (%s, %s, %s, %s, %s, %s, %s, %s) "
                "ON CONFLICT (owner, repo, path) DO UPDATE SET "
                "content = EXCLUDED.content, size_bytes = EXCLUDED.size_bytes, "
                "content_hash = EXCLUDED.content_hash, metadata = EXCLUDED.metadata, "
                "last_synced_at = EXCLUDED.last_synced_at, updated_at = NOW() "
                "WHERE documents.content_hash <> EXCLUDED.content_hash",
                [
                    (
                        d.source.owner,
                        d.source.repo,
                        d.path,
                        d.content,
                        d.size_bytes,
                        d.content_hash,
                        Jsonb(d.metadata),
                        d.last_synced_at,
                    )
                    for d in documents
                ],
            )
        return len(documents)

    async def delete_paths(self, source: Source, paths: list[str]) -> int:
        if not paths:
            return 0
        cur = await self._conn.execute(
            "DELETE FROM documents WHERE owner = %s AND repo = %s AND path = ANY(%s)",
            (source.owner, source.repo, paths),
        )
        return cur.rowcount

    async def mark_synced(self, source: Source, at: datetime) -> None:
        """Record a completed reconcile; the only writer of the source's sync clock."""
        await self._conn.execute(
            "INSERT INTO source_syncs (owner, repo, last_synced_at) VALUES (%s, %s, %s) "
            "ON CONFLICT (owner, repo) DO UPDATE SET last_synced_at = EXCLUDED.last_synced_at",
            (source.owner, source.repo, at),
        )
        await self._conn.execute(
            "UPDATE documents SET last_synced_at = %s WHERE owner = %s AND repo = %s",
            (at, source.owner, source.repo),
        )

    async def last_synced_at(self, source: Source) -> datetime | None:
        cur = await self._conn.execute(
            "SELECT last_synced_at FROM source_syncs WHERE owner = %s AND repo = %s",
            (source.owner, source.repo),
        )
        r = await cur.fetchone()
        return r[0] if r else None

    async def search(
        self,
        query: str,
        *,
        source: Source | None = None,
        path_prefix: str | None = None,
        limit: int = 50,
    ) -> list[Document]:
        """Title/path matches, best tier first, then by source and path."""
        sql, params = _search_query(query, source, path_prefix, limit)
        cur = await self._conn.execute(sql, params)
        return [_row_to_document(r) for r in await cur.fetchall()]

    async def stats(self) -> list[SourceStats]:
        cur = await self._conn.execute(
            "SELECT d.owner, d.repo, COUNT(*), COALESCE(SUM(d.size_bytes), 0), s.last_synced_at "
            "FROM documents d LEFT JOIN source_syncs s ON s.owner = d.owner AND s.repo = d.repo "
            "GROUP BY d.owner, d.repo, s.last_synced_at ORDER BY d.owner, d.repo"
        )
        return [
            SourceStats(
                owner=r[0],
                repo=r[1],
                file_count=r[2],
                total_bytes=int(r[3]),
                last_synced_at=r[4],
            )
            for r in await cur.fetchall()
        ]
