"""Batch inference provider port."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class BatchState(StrEnum):
    IN_PROGRESS = "in_progress"
    ENDED = "ended"
    FAILED = "failed"


@dataclass(frozen=True)
class BatchRequest:
    custom_id: str
    prompt: str
    model: str
    max_tokens: int
    temperature: float = 0.0


@dataclass(frozen=True)
class BatchStatus:
    """Provider-side progress of a submitted batch."""

    state: BatchState
    total: int = 0
    completed: int = 0
    failed: int = 0
    result_files: tuple[str, ...] = ()
    error: str | None = None

    @property
    def processed(self) -> int:
        return self.completed + self.failed


@dataclass(frozen=True)
class BatchOutcome:
    """Per-request outcome record."""

    custom_id: str
    success: bool
    content: str | None = None
    error: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None


class BatchProvider(Protocol):
    """Port for asynchronous batch inference."""

    async def submit_batch(self, requests: list[BatchRequest]) -> str: ...

    async def get_batch_status(self, handle: str) -> BatchStatus: ...

    async def fetch_results(self, result_files: tuple[str, ...]) -> list[BatchOutcome]: ...
