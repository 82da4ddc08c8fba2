"""Falcon ASGI application."""

import logging

import falcon
import falcon.asgi
from falcon.asgi import App

from docbundle.domain.exceptions import DocBundleError
from docbundle.interfaces.api.resources.distilled import (
    DistilledResource,
    DistilledVersionsResource,
)
from docbundle.interfaces.api.resources.documents import DocumentResource
from docbundle.interfaces.api.resources.health import HealthResource
from docbundle.interfaces.api.resources.jobs import JobResource, PresetJobsResource
from docbundle.interfaces.api.resources.presets import (
    PresetContentResource,
    PresetSizeResource,
    PresetsResource,
)
from docbundle.interfaces.api.resources.search import SearchResource
from docbundle.interfaces.api.resources.stats import StatsResource

logger = logging.getLogger(__name__)


async def handle_domain_error(req, resp, ex, params) -> None:
    """Infrastructure failures not handled by a resource: 500 with the captured message."""
    logger.error("%s %s failed: %s", req.method, req.path, ex)
    resp.status = falcon.HTTP_500
    resp.media = {"error": str(ex), "type": type(ex).__name__}


async def handle_unexpected(req, resp, ex, params) -> None:
    logger.exception("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}


def create_app(
    *,
    health_resource: HealthResource,
    presets_resource: PresetsResource,
    preset_content_resource: PresetContentResource,
    preset_size_resource: PresetSizeResource,
    preset_jobs_resource: PresetJobsResource,
    job_resource: JobResource,
    distilled_resource: DistilledResource,
    distilled_versions_resource: DistilledVersionsResource,
    document_resource: DocumentResource,
    search_resource: SearchResource,
    stats_resource: StatsResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes and error handlers."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(Exception, handle_unexpected)
    app.add_error_handler(DocBundleError, handle_domain_error)

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/presets", presets_resource)
    app.add_route("/v1/presets/{key}", preset_content_resource)
    app.add_route("/v1/presets/{key}/size", preset_size_resource)
    app.add_route("/v1/presets/{key}/jobs", preset_jobs_resource)
    app.add_route("/v1/jobs/{job_id}", job_resource)
    app.add_route("/v1/distilled/{group}", distilled_resource)
    app.add_route("/v1/distilled/{group}/versions", distilled_versions_resource)
    app.add_route("/v1/documents/{owner}/{repo}/{path:path}", document_resource)
    app.add_route("/v1/search", search_resource)
    app.add_route("/v1/stats", stats_resource)
    return app
