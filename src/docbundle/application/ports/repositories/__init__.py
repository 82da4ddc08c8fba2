"""Repository ports."""

from docbundle.application.ports.repositories.distillation_job_repository import (
    DistillationJobRepository,
)
from docbundle.application.ports.repositories.distillation_result_repository import (
    DistillationResultRepository,
)
from docbundle.application.ports.repositories.distilled_artifact_repository import (
    DistilledArtifactRepository,
)
from docbundle.application.ports.repositories.document_repository import (
    DocumentRepository,
)

__all__ = [
    "DistillationJobRepository",
    "DistillationResultRepository",
    "DistilledArtifactRepository",
    "DocumentRepository",
]
