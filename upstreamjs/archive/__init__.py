"""Archive inspection: glob matching and entry scanning."""

from upstreamjs.archive.glob import GlobMatcher
from upstreamjs.archive.scanner import (
    ArchiveEntryContent,
    ArchiveScanner,
    iter_files,
    nested_location,
    open_archive,
)

__all__ = [
    "ArchiveEntryContent",
    "ArchiveScanner",
    "GlobMatcher",
    "iter_files",
    "nested_location",
    "open_archive",
]
