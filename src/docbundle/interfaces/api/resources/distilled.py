"""Distilled artifact API resources."""

import falcon.asgi

from docbundle.application.use_cases.distillation.get_distilled import (
    GetDistilledUseCase,
    ListDistilledVersionsUseCase,
)
from docbundle.domain.exceptions import InvalidVersionTag, NotFound


class DistilledResource:
    """GET /v1/distilled/{group}?version= - distilled artifact text."""

    def __init__(self, get_distilled: GetDistilledUseCase) -> None:
        self._get_distilled = get_distilled

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group: str) -> None:
        try:
            artifact = await self._get_distilled.execute(group, req.get_param("version"))
        except InvalidVersionTag as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        except NotFound as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.content_type = falcon.MEDIA_TEXT
        resp.text = artifact.content
        resp.status = falcon.HTTP_200


class DistilledVersionsResource:
    """GET /v1/distilled/{group}/versions."""

    def __init__(self, list_versions: ListDistilledVersionsUseCase) -> None:
        self._list_versions = list_versions

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, group: str) -> None:
        artifacts = await self._list_versions.execute(group)
        resp.media = {
            "group": group,
            "versions": [
                {
                    "version": a.version,
                    "size_kb": a.size_kb,
                    "document_count": a.document_count,
                    "created_at": a.created_at.isoformat(),
                    "source_job_id": str(a.source_job_id) if a.source_job_id else None,
                }
                for a in artifacts
            ],
        }
        resp.status = falcon.HTTP_200
