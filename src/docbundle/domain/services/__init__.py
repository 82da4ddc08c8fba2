"""Pure domain algorithms."""

from docbundle.domain.services.frontmatter import extract_frontmatter
from docbundle.domain.services.minimizer import minimize
from docbundle.domain.services.path_ordering import compare_paths, sort_paths
from docbundle.domain.services.sizing import size_kb
from docbundle.domain.services.staleness import is_stale

__all__ = [
    "compare_paths",
    "extract_frontmatter",
    "is_stale",
    "minimize",
    "size_kb",
    "sort_paths",
]
