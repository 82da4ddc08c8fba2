"""Content statistics API resource."""

import falcon.asgi

from docbundle.application.use_cases.content.content_stats import ContentStatsUseCase


class StatsResource:
    """GET /v1/stats - per-source file counts and sizes."""

    def __init__(self, content_stats: ContentStatsUseCase) -> None:
        self._content_stats = content_stats

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        stats = await self._content_stats.execute()
        resp.media = {
            "sources": [
                {
                    "source": f"{s.owner}/{s.repo}",
                    "file_count": s.file_count,
                    "total_bytes": s.total_bytes,
                    "last_synced_at": s.last_synced_at.isoformat() if s.last_synced_at else None,
                }
                for s in stats
            ],
            "total_files": sum(s.file_count for s in stats),
            "total_bytes": sum(s.total_bytes for s in stats),
        }
        resp.status = falcon.HTTP_200
