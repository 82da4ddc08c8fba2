"""Parent-before-child ordering of document paths."""

from collections.abc import Callable, Iterable
from functools import cmp_to_key
from typing import TypeVar

T = TypeVar("T")

INDEX_FILENAMES = ("index.md", "index.mdx")


def ancestor_prefix(path: str) -> str:
    """Prefix shared by a path's descendants; an index file stands for its directory."""
    head, _, name = path.rpartition("/")
    if name in INDEX_FILENAMES:
        return f"{head}/" if head else ""
    return path


def compare_paths(a: str, b: str) -> int:
    """Ancestors sort before descendants, otherwise code-point order."""
    if a == b:
        return 0
    if b.startswith(ancestor_prefix(a)):
        return -1
    if a.startswith(ancestor_prefix(b)):
        return 1
    return -1 if a < b else 1


def sort_paths(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Sort items by their path using compare_paths."""
    return sorted(items, key=cmp_to_key(lambda x, y: compare_paths(key(x), key(y))))
