"""Dependency graph data model.

The graph itself is produced by ``DependencyGraphBuilder``; the collector
and materializer only ever read it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from upstreamjs.errors import ContainerResolutionError

logger = logging.getLogger("upstreamjs.graph.models")


class Scope(str, Enum):
    """Maven dependency scopes."""

    COMPILE = "compile"
    PROVIDED = "provided"
    RUNTIME = "runtime"
    TEST = "test"
    SYSTEM = "system"
    IMPORT = "import"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Scope":
        """Parse a scope name; empty means ``compile``."""
        if not value:
            return cls.COMPILE
        return cls(value.strip().lower())


ContainerResolver = Callable[["ArtifactRef"], "ArtifactRef"]


@dataclass(eq=False)
class ArtifactRef:
    """A single resolved dependency artifact.

    Equality is identity: two references to the same coordinates reached
    through different graph paths are distinct entries.

    Attributes:
        group_id: Maven groupId.
        artifact_id: Maven artifactId.
        version: Resolved version.
        scope: Declared dependency scope.
        type: Packaging type (jar, hpi, ...).
        classifier: Optional classifier.
        file: Local file holding the packaged contents, if known.
        container_resolver: Resolves the enclosing container artifact on demand.
    """

    group_id: str
    artifact_id: str
    version: str
    scope: Scope = Scope.COMPILE
    type: str = "jar"
    classifier: Optional[str] = None
    file: Optional[Path] = None
    container_resolver: Optional[ContainerResolver] = field(default=None, repr=False)
    _container: Optional["ArtifactRef"] = field(default=None, init=False, repr=False)

    @property
    def coordinates(self) -> str:
        parts = [self.group_id, self.artifact_id, self.type]
        if self.classifier:
            parts.append(self.classifier)
        parts.append(self.version)
        return ":".join(parts)

    def require_file(self) -> Path:
        """Return the artifact file.

        Raises:
            FileNotFoundError: If the artifact was never resolved to a file.
        """
        if self.file is None:
            raise FileNotFoundError(f"Artifact {self} has no resolved file")
        return self.file

    def container(self) -> "ArtifactRef":
        """Return the container artifact embedding this one, resolving it once.

        Raises:
            ContainerResolutionError: If no container can be resolved.
        """
        if self._container is None:
            if self.container_resolver is None:
                raise ContainerResolutionError(f"No container resolver for {self}")
            self._container = self.container_resolver(self)
            logger.debug("Resolved container %s for %s", self._container, self)
        return self._container

    def __str__(self) -> str:
        return f"{self.coordinates}:{self.scope.value}"


@dataclass(frozen=True)
class DependencyNode:
    """Node of the dependency graph; ``is_project`` is set only on the root."""

    artifact: ArtifactRef
    children: Tuple["DependencyNode", ...] = ()
    is_project: bool = False

    def walk(self):
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


__all__ = ["ArtifactRef", "ContainerResolver", "DependencyNode", "Scope"]
