"""Application DTOs."""

from docbundle.application.dto.job_report import DistillationJobReport
from docbundle.application.dto.materialized import (
    MaterializedBundle,
    MaterializedDocument,
    render_documents,
)
from docbundle.application.dto.preset import (
    DEFAULT_DISTILLATION_PROMPT,
    DistilledGroup,
    PresetDefinition,
)
from docbundle.application.dto.reconcile import IngestedFile, ReconcileResult
from docbundle.application.dto.stats import SourceStats

__all__ = [
    "DEFAULT_DISTILLATION_PROMPT",
    "DistillationJobReport",
    "DistilledGroup",
    "IngestedFile",
    "MaterializedBundle",
    "MaterializedDocument",
    "PresetDefinition",
    "ReconcileResult",
    "SourceStats",
    "render_documents",
]
