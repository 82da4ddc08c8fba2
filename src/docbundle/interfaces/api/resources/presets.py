"""Preset API resources."""

import falcon.asgi

from docbundle.application.services.preset_registry import PresetRegistry
from docbundle.application.use_cases.preset.get_materialized import GetMaterializedUseCase
from docbundle.application.use_cases.preset.preset_size import GetPresetSizeUseCase
from docbundle.domain.exceptions import NoContentForPreset, PresetNotFound


class PresetsResource:
    """GET /v1/presets - configured presets."""

    def __init__(self, registry: PresetRegistry) -> None:
        self._registry = registry

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        resp.media = {
            "items": [
                {
                    "key": p.key,
                    "title": p.title,
                    "description": p.description,
                    "source": p.source.key,
                    "distilled": p.distilled,
                }
                for p in self._registry.all()
            ]
        }
        resp.status = falcon.HTTP_200


class PresetContentResource:
    """GET /v1/presets/{key} - materialized preset text."""

    def __init__(self, get_materialized: GetMaterializedUseCase) -> None:
        self._get_materialized = get_materialized

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, key: str) -> None:
        try:
            text = await self._get_materialized.execute(key)
        except PresetNotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": f"Preset not found: {key}"}
            return
        except NoContentForPreset as e:
            resp.status = falcon.HTTP_404
            resp.media = {"error": str(e)}
            return
        resp.content_type = falcon.MEDIA_TEXT
        resp.text = text
        resp.status = falcon.HTTP_200


class PresetSizeResource:
    """GET /v1/presets/{key}/size - size of the served text in KB."""

    def __init__(self, preset_size: GetPresetSizeUseCase) -> None:
        self._preset_size = preset_size

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, key: str) -> None:
        try:
            size_kb = await self._preset_size.execute(key)
        except PresetNotFound:
            resp.status = falcon.HTTP_404
            resp.media = {"error": f"Preset not found: {key}"}
            return
        if size_kb is None:
            resp.media = {"size_kb": 0, "status": "not_generated"}
        else:
            resp.media = {"size_kb": size_kb}
        resp.status = falcon.HTTP_200
