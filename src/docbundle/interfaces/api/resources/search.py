"""Search API resource."""

import falcon.asgi

from docbundle.application.use_cases.content.search_documents import SearchDocumentsUseCase
from docbundle.domain.exceptions import ValidationError
from docbundle.domain.value_objects import Source
from docbundle.interfaces.api.resources.documents import document_to_media


class SearchResource:
    """GET /v1/search?q=&source=owner/repo&prefix= - title then path search."""

    def __init__(self, search: SearchDocumentsUseCase) -> None:
        self._search = search

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        try:
            raw_source = req.get_param("source")
            source = Source.parse(raw_source) if raw_source else None
            results = await self._search.execute(
                req.get_param("q") or "",
                source=source,
                path_prefix=req.get_param("prefix"),
            )
        except ValidationError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.media = {"results": [document_to_media(d, include_content=False) for d in results]}
        resp.status = falcon.HTTP_200
