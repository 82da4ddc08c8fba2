"""GitHub tarball ingester - streams repository files out of a gzip'd tar."""

import gzip
import io
import logging
import tarfile
import zlib
from collections.abc import Callable, Iterator
from pathlib import PurePosixPath

import httpx

from docbundle.application.dto import IngestedFile
from docbundle.domain.exceptions import ArchiveCorrupt, SourceUnavailable
from docbundle.domain.value_objects import Source

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class _ByteIterStream(io.RawIOBase):
    """Read-only file object over an iterator of byte chunks."""

    def __init__(self, chunks: Iterator[bytes]) -> None:
        self._chunks = chunks
        self._buffer = b""

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        while not self._buffer:
            chunk = next(self._chunks, None)
            if chunk is None:
                return 0
            self._buffer = chunk
        n = min(len(b), len(self._buffer))
        b[:n] = self._buffer[:n]
        self._buffer = self._buffer[n:]
        return n


class _StrictTarInfo(tarfile.TarInfo):
    """Header reader that fails on a cut-off or malformed header.

    In stream mode tarfile ends iteration quietly on such headers once past
    the first member; only the all-zero end-of-archive block may end it here.
    """

    @classmethod
    def fromtarfile(cls, archive: tarfile.TarFile) -> tarfile.TarInfo:
        try:
            return super().fromtarfile(archive)
        except tarfile.EOFHeaderError:
            raise
        except tarfile.HeaderError as e:
            raise tarfile.ReadError(f"bad header at offset {archive.offset}: {e}") from e


def strip_archive_root(name: str) -> str | None:
    """Drop the synthetic top-level directory ("owner-repo-sha/").

    Returns None for the root itself and for names that would escape the
    repository (absolute or containing "..").
    """
    _, sep, rest = name.partition("/")
    if not sep or not rest.strip():
        return None
    p = PurePosixPath(rest)
    if p.is_absolute() or ".." in p.parts:
        return None
    return "/".join(p.parts)


class GitHubTarballIngester:
    """Reads every matching regular file of a repository's default branch.

    Single pass over the response stream; only the current entry is held in
    memory.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: str = "",
        timeout: float = 120.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def ingest(self, source: Source, matcher: Callable[[str], bool]) -> Iterator[IngestedFile]:
        url = f"{self._base_url}/repos/{source.owner}/{source.repo}/tarball"
        client = self._client or httpx.Client(timeout=self._timeout, follow_redirects=True)
        try:
            yield from self._stream(client, url, source, matcher)
        finally:
            if self._client is None:
                client.close()

    def _stream(
        self,
        client: httpx.Client,
        url: str,
        source: Source,
        matcher: Callable[[str], bool],
    ) -> Iterator[IngestedFile]:
        count = 0
        try:
            with client.stream("GET", url, headers=self._headers(), follow_redirects=True) as resp:
                if not resp.is_success:
                    raise SourceUnavailable(
                        f"GET {url} returned HTTP {resp.status_code} for {source}"
                    )
                raw = io.BufferedReader(_ByteIterStream(resp.iter_bytes()))
                # GzipFile checks the end-of-stream trailer that "r|gz" skips.
                stream = gzip.GzipFile(fileobj=raw, mode="rb")
                with tarfile.open(fileobj=stream, mode="r|", tarinfo=_StrictTarInfo) as archive:
                    for member in archive:
                        if not member.isfile():
                            continue
                        path = strip_archive_root(member.name)
                        if path is None or not matcher(path):
                            continue
                        fh = archive.extractfile(member)
                        if fh is None:
                            continue
                        count += 1
                        yield IngestedFile(path=path, data=fh.read())
                # Padding after the end-of-archive block is still part of the download.
                while stream.read(io.DEFAULT_BUFFER_SIZE):
                    pass
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"Fetching {source} failed: {e}") from e
        except (tarfile.TarError, gzip.BadGzipFile, zlib.error, EOFError) as e:
            raise ArchiveCorrupt(f"Archive for {source} is corrupt: {e}") from e
        logger.info("Ingested %d files from %s", count, source)
