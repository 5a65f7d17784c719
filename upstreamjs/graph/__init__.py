"""Public graph API surface."""

from upstreamjs.graph.builder import DependencyGraphBuilder
from upstreamjs.graph.models import ArtifactRef, DependencyNode, Scope
from upstreamjs.graph.repository import DEFAULT_LOCAL_REPOSITORY, LocalRepository

__all__ = [
    "ArtifactRef",
    "DEFAULT_LOCAL_REPOSITORY",
    "DependencyGraphBuilder",
    "DependencyNode",
    "LocalRepository",
    "Scope",
]
