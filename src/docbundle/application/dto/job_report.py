"""Distillation job status DTOs."""

from dataclasses import dataclass, field

from docbundle.domain.entities import DistillationJob


@dataclass(frozen=True)
class DistillationJobReport:
    """A job together with the paths whose distillation failed."""

    job: DistillationJob
    failed_paths: list[str] = field(default_factory=list)
