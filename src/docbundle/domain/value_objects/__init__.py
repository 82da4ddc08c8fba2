"""Domain value objects."""

from docbundle.domain.value_objects.content_hash import ContentHash
from docbundle.domain.value_objects.job_status import JobStatus
from docbundle.domain.value_objects.minimize_options import MinimizeOptions
from docbundle.domain.value_objects.path_pattern import PathPattern, matches_any
from docbundle.domain.value_objects.source import Source
from docbundle.domain.value_objects.version_tag import LATEST, VersionTag

__all__ = [
    "LATEST",
    "ContentHash",
    "JobStatus",
    "MinimizeOptions",
    "PathPattern",
    "Source",
    "VersionTag",
    "matches_any",
]
