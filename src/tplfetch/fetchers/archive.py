"""Streamed .tar.gz extraction with path-prefix stripping.

The archive is read once, front to back, in tarfile stream mode; nothing is
buffered to disk before extraction.
"""

from __future__ import annotations

import io
import logging
import tarfile
import zlib
from collections.abc import Iterable, Iterator
from pathlib import Path

from tplfetch.core.errors import ExtractionFailure

logger = logging.getLogger(__name__)


class ChunkReader(io.RawIOBase):
    """Readable file object over an iterator of byte chunks."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks: Iterator[bytes] = iter(chunks)
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


def strip_prefix(archive_root: str, subpath: str = "") -> str:
    """Prefix removed from every kept entry: ``root/`` or ``root/subpath/``."""
    prefix = f"{archive_root.strip('/')}/"
    if subpath:
        prefix += f"{subpath.strip('/')}/"
    return prefix


def extract_tar_gz(
    chunks: Iterable[bytes],
    dest: Path,
    prefix: str,
    *,
    detect_root: bool = False,
) -> list[Path]:
    """Extract entries under *prefix* from a gzip'd tar stream into *dest*.

    Output paths are the entry paths with *prefix* removed. Entries outside
    the prefix are skipped, so a prefix that names a file rather than a
    directory extracts nothing. Returns the paths written.

    With *detect_root*, the first segment of *prefix* is replaced by the
    top-level directory of the first entry. Codeload does not always name
    it ``repo-ref``: ``v1.0`` unpacks to ``repo-1.0/`` and a short SHA to
    the full one.

    Symlinks that resolve outside *dest* are skipped; a subtree may link
    to siblings that were not requested.
    """
    written: list[Path] = []
    try:
        with tarfile.open(fileobj=ChunkReader(chunks), mode="r|gz") as tar:
            for member in tar:
                if detect_root:
                    prefix = _reroot(prefix, member.name)
                    detect_root = False
                if not member.name.startswith(prefix):
                    logger.debug("skip %s", member.name)
                    continue
                relative = member.name[len(prefix):]
                if not relative:
                    continue
                if member.islnk():
                    if not member.linkname.startswith(prefix):
                        raise ExtractionFailure(
                            f"hard link {member.name} points outside {prefix}"
                        )
                    member.linkname = member.linkname[len(prefix):]
                member.name = relative
                try:
                    tar.extract(member, dest, filter="data")
                except tarfile.LinkOutsideDestinationError as exc:
                    logger.debug("skip %s: %s", relative, exc)
                    continue
                written.append(dest / relative)
    except tarfile.TarError as exc:
        raise ExtractionFailure(str(exc)) from exc
    except (zlib.error, EOFError) as exc:
        raise ExtractionFailure(f"corrupt gzip stream: {exc}") from exc
    except OSError as exc:
        raise ExtractionFailure(f"cannot write into {dest}: {exc}") from exc
    return written


def _reroot(prefix: str, entry: str) -> str:
    expected, _, rest = prefix.partition("/")
    actual = entry.split("/", 1)[0]
    if actual and actual != expected:
        logger.debug("archive root is %s, expected %s", actual, expected)
        return f"{actual}/{rest}"
    return prefix
