"""Get document use case."""

from docbundle.domain.entities import Document
from docbundle.domain.exceptions import NotFound
from docbundle.domain.value_objects import Source


class GetDocumentUseCase:
    """Get current content of one document by source and path."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, source: Source, path: str) -> Document:
        async with self._uow_factory() as uow:
            document = await uow.documents.get(source, path)
        if document is None:
            raise NotFound("Document", f"{source}/{path}")
        return document
