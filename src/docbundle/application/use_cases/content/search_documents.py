"""Search documents use case."""

from docbundle.domain.entities import Document
from docbundle.domain.exceptions import ValidationError
from docbundle.domain.value_objects import Source

TITLE_EXACT = 0
TITLE_PARTIAL = 1
PATH_SUBSTRING = 2


def match_rank(document: Document, query: str) -> int | None:
    """Precedence of a match, lower is better; None when the document does not match."""
    q = query.casefold()
    title = document.title.casefold()
    if title == q:
        return TITLE_EXACT
    if q in title:
        return TITLE_PARTIAL
    if q in document.path.casefold():
        return PATH_SUBSTRING
    return None


class SearchDocumentsUseCase:
    """Find documents by title, then by path."""

    def __init__(self, unit_of_work_factory: type, limit: int = 20) -> None:
        self._uow_factory = unit_of_work_factory
        self._limit = limit

    async def execute(
        self,
        query: str,
        source: Source | None = None,
        path_prefix: str | None = None,
    ) -> list[Document]:
        """Matches ordered title-exact, title-partial, path-substring, then by path."""
        query = (query or "").strip()
        if not query:
            raise ValidationError("query is required")
        async with self._uow_factory() as uow:
            candidates = await uow.documents.search(
                query, source=source, path_prefix=path_prefix, limit=self._limit
            )
        # The repository ranks before limiting; re-rank to keep a stable order.
        ranked = []
        for doc in candidates:
            rank = match_rank(doc, query)
            if rank is not None:
                ranked.append((rank, doc.source.key, doc.path, doc))
        ranked.sort(key=lambda r: r[:3])
        return [r[3] for r in ranked]
