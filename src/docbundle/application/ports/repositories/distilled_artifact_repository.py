"""Distilled artifact repository port."""

from typing import Protocol

from docbundle.domain.entities import DistilledArtifact


class DistilledArtifactRepository(Protocol):
    """Port for versioned distilled artifacts, keyed by (group_name, version)."""

    async def upsert(self, artifact: DistilledArtifact) -> DistilledArtifact: ...

    async def get(self, group_name: str, version: str) -> DistilledArtifact | None: ...

    async def list_versions(self, group_name: str) -> list[DistilledArtifact]: ...
