"""Maven-layout local repository lookups."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from upstreamjs.errors import ContainerResolutionError
from upstreamjs.graph.models import ArtifactRef

logger = logging.getLogger("upstreamjs.graph.repository")

DEFAULT_LOCAL_REPOSITORY = Path.home() / ".m2" / "repository"


class LocalRepository:
    """Locates artifact files in a local Maven repository.

    Layout::

        <root>/<group as path>/<artifactId>/<version>/<artifactId>-<version>[-<classifier>].<type>
    """

    def __init__(self, root: Optional[Path] = None, container_type: str = "hpi") -> None:
        self.root = Path(root) if root is not None else DEFAULT_LOCAL_REPOSITORY
        self.container_type = container_type

    def path_for(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        type_: str = "jar",
        classifier: Optional[str] = None,
    ) -> Path:
        """Return the repository path for the given coordinates."""
        file_name = f"{artifact_id}-{version}"
        if classifier:
            file_name += f"-{classifier}"
        file_name += f".{type_}"
        return self.root.joinpath(*group_id.split("."), artifact_id, version, file_name)

    def locate(self, artifact: ArtifactRef) -> Path:
        """Return the artifact's explicit file, else its repository path."""
        if artifact.file is not None:
            return artifact.file
        return self.path_for(
            artifact.group_id,
            artifact.artifact_id,
            artifact.version,
            artifact.type,
            artifact.classifier,
        )

    def resolve_container(self, artifact: ArtifactRef) -> ArtifactRef:
        """Resolve the plugin container artifact that bundles ``artifact``.

        Raises:
            ContainerResolutionError: If the container file is not in the repository.
        """
        path = self.path_for(
            artifact.group_id,
            artifact.artifact_id,
            artifact.version,
            self.container_type,
        )
        if not path.is_file():
            raise ContainerResolutionError(
                f"No {self.container_type} container for {artifact} at {path}"
            )
        return ArtifactRef(
            group_id=artifact.group_id,
            artifact_id=artifact.artifact_id,
            version=artifact.version,
            scope=artifact.scope,
            type=self.container_type,
            file=path,
        )


__all__ = ["DEFAULT_LOCAL_REPOSITORY", "LocalRepository"]
