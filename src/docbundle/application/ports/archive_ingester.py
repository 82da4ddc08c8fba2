"""Archive ingester port - streams files out of a source snapshot."""

from collections.abc import Callable, Iterator
from typing import Protocol

from docbundle.application.dto import IngestedFile
from docbundle.domain.value_objects import Source


class ArchiveIngester(Protocol):
    """Port for reading the files of a source at its current revision.

    Blocking: callers run it off the event loop.
    """

    def ingest(self, source: Source, matcher: Callable[[str], bool]) -> Iterator[IngestedFile]: ...
