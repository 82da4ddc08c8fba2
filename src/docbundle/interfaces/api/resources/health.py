"""Health check endpoint."""

import falcon.asgi

from docbundle import __version__


class HealthResource:
    """GET /v1/health - liveness."""

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = {"status": "ok", "version": __version__}
        resp.status = falcon.HTTP_200
