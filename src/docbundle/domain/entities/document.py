"""Document entity."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from docbundle.domain.value_objects import Source

_NUMERIC_PREFIX = re.compile(r"^\d+-")


@dataclass
class Document:
    """Current content of one file in a source, keyed by (source, path)."""

    source: Source
    path: str
    content: str
    size_bytes: int
    content_hash: str
    last_synced_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None

    @property
    def filename(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def title(self) -> str:
        """Front matter title, falling back to the filename without ordering prefix."""
        title = self.metadata.get("title")
        if isinstance(title, str) and title:
            return title
        stem = self.filename
        for ext in (".mdx", ".md"):
            if stem.endswith(ext):
                stem = stem[: -len(ext)]
                break
        return _NUMERIC_PREFIX.sub("", stem)
