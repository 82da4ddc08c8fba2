"""Document API resource."""

import falcon.asgi

from docbundle.application.use_cases.content.get_document import GetDocumentUseCase
from docbundle.domain.entities import Document
from docbundle.domain.exceptions import NotFound, ValidationError
from docbundle.domain.value_objects import Source


def document_to_media(doc: Document, include_content: bool = True) -> dict:
    media = {
        "owner": doc.source.owner,
        "repo": doc.source.repo,
        "path": doc.path,
        "title": doc.title,
        "size_bytes": doc.size_bytes,
        "content_hash": doc.content_hash,
        "metadata": doc.metadata,
        "last_synced_at": doc.last_synced_at.isoformat() if doc.last_synced_at else None,
    }
    if include_content:
        media["content"] = doc.content
    return media


class DocumentResource:
    """GET /v1/documents/{owner}/{repo}/{path} - one stored document."""

    def __init__(self, get_document: GetDocumentUseCase) -> None:
        self._get_document = get_document

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        owner: str,
        repo: str,
        path: str,
    ) -> None:
        try:
            source = Source(owner=owner, repo=repo)
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        try:
            doc = await self._get_document.execute(source, path)
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.media = document_to_media(doc)
        resp.status = falcon.HTTP_200
