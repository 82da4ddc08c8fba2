"""Content hash used for change detection."""

import hashlib
import re
from dataclasses import dataclass

_HEX_SHA256 = re.compile(r"[0-9a-f]{64}")


@dataclass(frozen=True)
class ContentHash:
    """SHA-256 hex digest of document content (UTF-8)."""

    value: str

    def __post_init__(self) -> None:
        if not _HEX_SHA256.fullmatch(self.value):
            raise ValueError("SHA-256 hash must be 64 lowercase hex characters")

    @classmethod
    def of(cls, content: str) -> "ContentHash":
        return cls(hashlib.sha256(content.encode("utf-8")).hexdigest())

    def __str__(self) -> str:
        return self.value
