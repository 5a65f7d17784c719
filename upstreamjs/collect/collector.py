"""Collects upstream dependencies that package a JavaScript module.

The walk is depth-first and pre-order, starting at the project node. A
dependency qualifies when its archive holds a ``package.json`` at the top
level, or, when its own file cannot be read, when its plugin container
bundles it under ``WEB-INF/lib``.

Children of a non-root node are only visited while the accumulated result
is non-empty. A qualifying module nested below a dependency that did not
qualify (with nothing collected before it) is therefore never reached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from upstreamjs.archive.scanner import ArchiveScanner
from upstreamjs.errors import ContainerResolutionError
from upstreamjs.graph.models import ArtifactRef, DependencyNode, Scope

logger = logging.getLogger("upstreamjs.collect.collector")

DESCRIPTOR_NAME = "package.json"
CONTAINER_LIB_PATTERN = "WEB-INF/lib/{artifact_id}.jar"


class CollectOutcome(str, Enum):
    """Result of inspecting a single dependency."""

    SKIPPED_SCOPE = "skipped_scope"
    FOUND_IN_PRIMARY = "found_in_primary"
    FOUND_IN_CONTAINER = "found_in_container"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Inspection:
    """Tagged inspection result; ``collected`` is the artifact to add, if any."""

    outcome: CollectOutcome
    collected: Optional[ArtifactRef] = None


class DependencyCollector:
    """Walks a dependency tree and returns the artifacts carrying a module.

    Attributes:
        outcomes: ``(artifact, outcome)`` for every inspected node of the
            last ``collect`` call, in visit order.
    """

    def __init__(
        self,
        scanner: Optional[ArchiveScanner] = None,
        descriptor_name: str = DESCRIPTOR_NAME,
        skip_scopes: Iterable[Scope] = (Scope.SYSTEM,),
    ) -> None:
        self.scanner = scanner or ArchiveScanner()
        self.descriptor_name = descriptor_name
        self.skip_scopes = frozenset(skip_scopes)
        self.outcomes: List[Tuple[ArtifactRef, CollectOutcome]] = []

    def collect(self, root: DependencyNode) -> List[ArtifactRef]:
        """Collect qualifying artifacts below ``root``.

        Args:
            root: Project node of the dependency tree.

        Returns:
            List[ArtifactRef]: Qualifying artifacts in traversal order.
        """
        results: List[ArtifactRef] = []
        self.outcomes = []
        self._visit(root, results)
        return results

    def _visit(self, node: DependencyNode, results: List[ArtifactRef]) -> None:
        if not node.is_project:
            inspection = self.inspect(node.artifact)
            self.outcomes.append((node.artifact, inspection.outcome))
            if inspection.collected is not None:
                results.append(inspection.collected)

        # Only keep descending while upstream modules are being found.
        if node.is_project or results:
            for child in node.children:
                self._visit(child, results)

    def inspect(self, artifact: ArtifactRef) -> Inspection:
        """Decide whether ``artifact`` packages a module."""
        if artifact.scope in self.skip_scopes:
            logger.debug("Skipping %s-scoped artifact: %s", artifact.scope.value, artifact)
            return Inspection(CollectOutcome.SKIPPED_SCOPE)

        logger.debug("Testing artifact for upstream modules: %s", artifact)
        try:
            entries = self.scanner.scan(artifact.require_file(), self.descriptor_name, limit=1)
        except OSError as exc:
            logger.warning("Unable to find artifact: %s (%s)", artifact, exc)
            return self._inspect_container(artifact)

        if entries:
            logger.info("Adding upstream module: %s", artifact)
            return Inspection(CollectOutcome.FOUND_IN_PRIMARY, artifact)
        return Inspection(CollectOutcome.NOT_FOUND)

    def _inspect_container(self, artifact: ArtifactRef) -> Inspection:
        pattern = CONTAINER_LIB_PATTERN.format(artifact_id=artifact.artifact_id)
        try:
            container = artifact.container()
            entries = self.scanner.scan(container.require_file(), pattern, limit=1)
        except (ContainerResolutionError, OSError) as exc:
            logger.error("Unable to find container artifact for: %s (%s)", artifact, exc)
            return Inspection(CollectOutcome.NOT_FOUND)

        if entries:
            logger.info("Adding upstream module container: %s for %s", container, artifact)
            return Inspection(CollectOutcome.FOUND_IN_CONTAINER, container)
        return Inspection(CollectOutcome.NOT_FOUND)


__all__ = [
    "CONTAINER_LIB_PATTERN",
    "CollectOutcome",
    "DESCRIPTOR_NAME",
    "DependencyCollector",
    "Inspection",
]
