"""Domain entities."""

from docbundle.domain.entities.distillation import (
    DistillationJob,
    DistillationResult,
    DistilledArtifact,
)
from docbundle.domain.entities.document import Document

__all__ = [
    "DistillationJob",
    "DistillationResult",
    "DistilledArtifact",
    "Document",
]
