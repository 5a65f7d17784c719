"""Runs one upstream module install for a project.

The run is gated on the project itself being a JavaScript project (a
readable ``package.json`` in its base directory). It then builds the
dependency tree, collects the upstream modules and materializes them.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from typing import List, Optional

from upstreamjs.archive.scanner import ArchiveScanner
from upstreamjs.collect.collector import DependencyCollector
from upstreamjs.config.schema import InstallConfig
from upstreamjs.errors import MaterializationError
from upstreamjs.graph.builder import DependencyGraphBuilder, GraphSource
from upstreamjs.graph.models import ArtifactRef
from upstreamjs.graph.repository import LocalRepository
from upstreamjs.install.materializer import MaterializeStats, ModuleMaterializer

logger = logging.getLogger("upstreamjs.runtime.process")


@dataclass
class InstallResult:
    """Summary of a completed run."""

    project: str
    artifacts: List[ArtifactRef] = field(default_factory=list)
    stats: MaterializeStats = field(default_factory=MaterializeStats)
    elapsed_ms: int = 0
    skipped: bool = False


class UpstreamInstaller:
    """Wires the graph builder, collector and materializer together."""

    def __init__(
        self,
        config: InstallConfig,
        builder: Optional[DependencyGraphBuilder] = None,
        collector: Optional[DependencyCollector] = None,
        materializer: Optional[ModuleMaterializer] = None,
    ) -> None:
        self.config = config
        scanner = ArchiveScanner()
        self.builder = builder or DependencyGraphBuilder(
            LocalRepository(config.local_repository, container_type=config.container_type)
        )
        self.collector = collector or DependencyCollector(
            scanner,
            descriptor_name=config.descriptor_name,
            skip_scopes=config.skipped_scopes,
        )
        self.materializer = materializer or ModuleMaterializer(
            scanner, descriptor_name=config.descriptor_name
        )

    def is_js_project(self) -> bool:
        marker = self.config.marker_file
        return marker.is_file() and os.access(marker, os.R_OK)

    def run(self, graph_source: GraphSource) -> InstallResult:
        """Install upstream modules for the project.

        Args:
            graph_source: Dependency graph document (see ``DependencyGraphBuilder``).

        Returns:
            InstallResult: Summary of the run.

        Raises:
            GraphBuildError: If the dependency graph cannot be built.
            ConfigurationError: If a module descriptor is invalid.
            MaterializationError: If writing the output tree fails.
        """
        if not self.is_js_project():
            project = self.config.base_dir.resolve().name
            logger.info("Skipping upstream dependency install for non-js project: %s", project)
            return InstallResult(project=project, skipped=True)

        start_time = time.time()
        root = self.builder.build(graph_source)
        project = root.artifact.artifact_id

        artifacts = self.collector.collect(root)
        if not artifacts:
            logger.info("No upstream dependencies found for: %s", project)
            return InstallResult(project=project)

        output_dir = self.config.output_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise MaterializationError(
                f"Unable to make node_modules directory: {output_dir}", path=output_dir
            ) from exc

        logger.info("Installing upstream dependencies...")
        stats = self.materializer.materialize(artifacts, output_dir)

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "Done installing upstream dependencies for %s in %dms (%d copied, %d up to date)",
            project,
            elapsed_ms,
            stats.copied,
            stats.skipped,
        )
        return InstallResult(
            project=project, artifacts=artifacts, stats=stats, elapsed_ms=elapsed_ms
        )


def process_node_dependencies(config: InstallConfig, graph_source: GraphSource) -> InstallResult:
    """Convenience wrapper running a default-wired ``UpstreamInstaller``."""
    return UpstreamInstaller(config).run(graph_source)


__all__ = ["InstallResult", "UpstreamInstaller", "process_node_dependencies"]
