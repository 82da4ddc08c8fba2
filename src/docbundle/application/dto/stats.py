"""Content statistics DTOs."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SourceStats:
    owner: str
    repo: str
    file_count: int
    total_bytes: int
    last_synced_at: datetime | None
