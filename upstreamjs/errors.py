"""Exception hierarchy for upstreamjs.

Recoverable conditions (an unreadable artifact, a missing container) are
handled inside the collector. Everything deriving from
``MaterializationError`` or ``ConfigurationError`` aborts the whole run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class UpstreamError(Exception):
    """Base class for all upstreamjs errors."""

    pass


class ConfigurationError(UpstreamError):
    """Invalid configuration, glob pattern or module descriptor."""

    pass


class GraphBuildError(UpstreamError):
    """The dependency graph could not be built from its source."""

    pass


class ContainerResolutionError(UpstreamError):
    """No container artifact could be resolved for an artifact."""

    pass


class MaterializationError(UpstreamError):
    """Fatal failure while writing modules to the output tree.

    Attributes:
        path: Offending filesystem path, when known.
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ArchiveSecurityError(MaterializationError):
    """Raised when an archive entry would be written outside its module directory."""

    pass


class ArchiveReadError(OSError):
    """An archive (or a nested archive entry) could not be opened or read."""

    pass


__all__ = [
    "ArchiveReadError",
    "ArchiveSecurityError",
    "ConfigurationError",
    "ContainerResolutionError",
    "GraphBuildError",
    "MaterializationError",
    "UpstreamError",
]
