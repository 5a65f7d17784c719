"""Archive inspection helpers.

An archive location is either a plain filesystem path or a nested location
``<outer archive>!/<entry path>`` naming an archive stored inside another
archive (for instance a jar bundled under ``WEB-INF/lib`` of a plugin).
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional, Tuple, Union

from upstreamjs.archive.glob import GlobMatcher
from upstreamjs.errors import ArchiveReadError

logger = logging.getLogger("upstreamjs.archive.scanner")

NESTED_SEPARATOR = "!/"

# Raised by zipfile while decompressing damaged entry data.
CORRUPT_DATA_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError)

ArchiveLocation = Union[str, Path]


class ArchiveEntryContent(NamedTuple):
    """A matched archive entry and its full content."""

    path: str
    data: bytes


def split_location(location: ArchiveLocation) -> Tuple[Path, Optional[str]]:
    """Split a location into the outer archive path and optional nested entry."""
    text = str(location)
    if NESTED_SEPARATOR in text:
        outer, inner = text.split(NESTED_SEPARATOR, 1)
        return Path(outer), inner
    return Path(text), None


def nested_location(outer: ArchiveLocation, entry: str) -> str:
    """Build a location addressing ``entry`` inside the archive at ``outer``."""
    return f"{outer}{NESTED_SEPARATOR}{entry}"


@contextmanager
def open_archive(location: ArchiveLocation) -> Iterator[zipfile.ZipFile]:
    """Open the archive at ``location``; it is closed when the block exits.

    Raises:
        OSError: If the outer file cannot be opened.
        ArchiveReadError: If the archive is corrupt or the nested entry is missing.
    """
    outer, inner = split_location(location)
    try:
        if inner is None:
            archive = zipfile.ZipFile(outer)
        else:
            with zipfile.ZipFile(outer) as container:
                try:
                    data = container.read(inner)
                except KeyError as exc:
                    raise ArchiveReadError(
                        f"No entry {inner!r} in archive {outer}"
                    ) from exc
            archive = zipfile.ZipFile(io.BytesIO(data))
    except CORRUPT_DATA_ERRORS as exc:
        raise ArchiveReadError(f"Unreadable archive {location}: {exc}") from exc

    with archive:
        yield archive


def iter_files(archive: zipfile.ZipFile) -> Iterator[zipfile.ZipInfo]:
    """Yield the non-directory entries of ``archive`` in archive order."""
    for info in archive.infolist():
        if not info.is_dir():
            yield info


class ArchiveScanner:
    """Finds archive entries whose path matches a glob pattern.

    Every call re-opens the archive; nothing is cached between calls.
    """

    def scan(
        self,
        location: ArchiveLocation,
        pattern: str,
        limit: Optional[int] = None,
    ) -> List[ArchiveEntryContent]:
        """Return the contents of all entries matching ``pattern``.

        Args:
            location: Archive location (path or nested ``outer!/entry``).
            pattern: Glob pattern (see ``GlobMatcher``).
            limit: Stop after this many matches, if given.

        Returns:
            List[ArchiveEntryContent]: Matches in archive order, possibly empty.

        Raises:
            OSError: If the archive cannot be opened or read.
        """
        matcher = GlobMatcher(pattern)
        logger.debug("Looking for %s in %s", pattern, location)
        results: List[ArchiveEntryContent] = []

        with open_archive(location) as archive:
            for info in iter_files(archive):
                matched = matcher.matches(info.filename)
                logger.debug("Entry: %s, matches: %s", info.filename, matched)
                if not matched:
                    continue
                try:
                    data = archive.read(info)
                except CORRUPT_DATA_ERRORS as exc:
                    raise ArchiveReadError(
                        f"Failed to read {info.filename} from {location}: {exc}"
                    ) from exc
                results.append(ArchiveEntryContent(info.filename, data))
                if limit is not None and len(results) >= limit:
                    break

        return results

    def scan_first(
        self, location: ArchiveLocation, pattern: str
    ) -> Optional[ArchiveEntryContent]:
        """Return the first entry matching ``pattern``, or None."""
        found = self.scan(location, pattern, limit=1)
        return found[0] if found else None


__all__ = [
    "ArchiveEntryContent",
    "ArchiveLocation",
    "ArchiveScanner",
    "CORRUPT_DATA_ERRORS",
    "NESTED_SEPARATOR",
    "iter_files",
    "nested_location",
    "open_archive",
    "split_location",
]
