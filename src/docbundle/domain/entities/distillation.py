"""Distillation entities: job, per-document result and stored artifact."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from docbundle.domain.exceptions import InvalidJobTransition
from docbundle.domain.value_objects import JobStatus


@dataclass
class DistillationJob:
    """State-machine record of one orchestration run."""

    id: UUID
    preset_key: str
    model: str
    status: JobStatus
    total_files: int
    created_at: datetime
    processed_files: int = 0
    successful_files: int = 0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    batch_handle: str | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error_message: str | None = None

    def _move_to(self, target: JobStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidJobTransition(
                f"Job {self.id} cannot move from {self.status} to {target}"
            )
        self.status = target

    def _set_counts(self, processed: int, successful: int) -> None:
        if processed < 0 or successful < 0:
            raise InvalidJobTransition("File counts must be non-negative")
        if processed > self.total_files:
            raise InvalidJobTransition(
                f"processed_files {processed} exceeds total_files {self.total_files}"
            )
        if successful > processed:
            raise InvalidJobTransition(
                f"successful_files {successful} exceeds processed_files {processed}"
            )
        self.processed_files = processed
        self.successful_files = successful

    def mark_processing(self, batch_handle: str, at: datetime) -> None:
        """Record the provider batch handle once submission succeeded."""
        if self.status is not JobStatus.PENDING:
            raise InvalidJobTransition(f"Job {self.id} already {self.status}")
        self._move_to(JobStatus.PROCESSING)
        self.batch_handle = batch_handle
        self.started_at = at

    def record_progress(self, processed: int, successful: int) -> None:
        if self.status is not JobStatus.PROCESSING:
            raise InvalidJobTransition(f"Job {self.id} is {self.status}, not processing")
        self._set_counts(processed, successful)

    def complete(
        self,
        processed: int,
        successful: int,
        input_tokens: int,
        output_tokens: int,
        at: datetime,
    ) -> None:
        self._move_to(JobStatus.COMPLETED)
        self._set_counts(processed, successful)
        self.total_input_tokens = input_tokens
        self.total_output_tokens = output_tokens
        self.completed_at = at

    def fail(self, message: str, at: datetime) -> None:
        self._move_to(JobStatus.FAILED)
        self.error_message = message
        self.completed_at = at


@dataclass
class DistillationResult:
    """Outcome for one input document of a job. Append-only."""

    id: UUID
    job_id: UUID
    path: str
    original_content: str
    prompt_used: str
    success: bool
    created_at: datetime
    distilled_content: str | None = None
    error_message: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None


@dataclass
class DistilledArtifact:
    """Named, versioned derived document."""

    group_name: str
    version: str
    content: str
    size_kb: int
    document_count: int
    created_at: datetime
    source_job_id: UUID | None = None
