"""Application ports - interfaces for external adapters."""

from docbundle.application.ports.archive_ingester import ArchiveIngester
from docbundle.application.ports.batch_provider import (
    BatchOutcome,
    BatchProvider,
    BatchRequest,
    BatchState,
    BatchStatus,
)
from docbundle.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "ArchiveIngester",
    "BatchOutcome",
    "BatchProvider",
    "BatchRequest",
    "BatchState",
    "BatchStatus",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
