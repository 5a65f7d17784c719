"""Builds the dependency tree from an externally produced graph document.

Two JSON shapes are accepted:

* the nested tree written by ``mvn dependency:tree -DoutputType=json``,
  whose top node is the project itself;
* a networkx node-link document whose graph attribute ``root`` names the
  project node (otherwise the single node without predecessors is used).

Both are loaded into a ``networkx.DiGraph`` first; successor order follows
the order in which the document lists children/edges.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import networkx as nx

from upstreamjs.errors import GraphBuildError
from upstreamjs.graph.models import ArtifactRef, DependencyNode, Scope
from upstreamjs.graph.repository import LocalRepository

logger = logging.getLogger("upstreamjs.graph.builder")

GraphSource = Union[str, Path, Dict[str, Any]]

_REQUIRED_FIELDS = ("groupId", "artifactId", "version")
_ARTIFACT_FIELDS = _REQUIRED_FIELDS + ("type", "classifier", "scope", "file")


class DependencyGraphBuilder:
    """Turns a dependency graph document into a ``DependencyNode`` tree."""

    def __init__(self, repository: Optional[LocalRepository] = None) -> None:
        self.repository = repository or LocalRepository()

    def build(self, source: GraphSource) -> DependencyNode:
        """Build the dependency tree rooted at the project node.

        Args:
            source: Path to a JSON document, or an already parsed mapping.

        Returns:
            DependencyNode: Project root node.

        Raises:
            GraphBuildError: If the document is unreadable, malformed or cyclic.
        """
        data, base_dir = self._load(source)
        graph, root_id = self.to_networkx(data)

        if not nx.is_directed_acyclic_graph(graph):
            cycle = nx.find_cycle(graph)
            path = " -> ".join(str(edge[0]) for edge in cycle)
            raise GraphBuildError(f"Dependency graph contains a cycle: {path}")

        root = self._to_node(graph, root_id, base_dir, is_project=True)
        logger.debug(
            "Built dependency tree for %s with %d node(s)",
            root.artifact,
            sum(1 for _ in root.walk()),
        )
        return root

    def to_networkx(self, data: Dict[str, Any]) -> Tuple[nx.DiGraph, Any]:
        """Load a graph document into a DiGraph and return it with its root id."""
        if "nodes" in data:
            return self._from_node_link(data)
        return self._from_tree(data)

    def _load(self, source: GraphSource) -> Tuple[Dict[str, Any], Optional[Path]]:
        if isinstance(source, dict):
            return source, None

        path = Path(source)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise GraphBuildError(f"Unable to read dependency graph {path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise GraphBuildError(f"Invalid dependency graph JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise GraphBuildError(f"Dependency graph {path} must be a JSON object")
        return data, path.parent

    def _from_tree(self, data: Dict[str, Any]) -> Tuple[nx.DiGraph, Any]:
        graph = nx.DiGraph()
        counter = 0

        def add(entry: Any, parent: Optional[int]) -> None:
            nonlocal counter
            if not isinstance(entry, dict):
                raise GraphBuildError(f"Dependency tree node must be an object: {entry!r}")
            node_id = counter
            counter += 1
            graph.add_node(node_id, **{k: entry[k] for k in _ARTIFACT_FIELDS if k in entry})
            if parent is not None:
                graph.add_edge(parent, node_id)
            for child in entry.get("children") or []:
                add(child, node_id)

        add(data, None)
        return graph, 0

    def _from_node_link(self, data: Dict[str, Any]) -> Tuple[nx.DiGraph, Any]:
        edge_key = "links" if "links" in data and "edges" not in data else "edges"
        try:
            graph = nx.node_link_graph(
                data, directed=True, multigraph=False, edges=edge_key
            )
        except (KeyError, TypeError, nx.NetworkXError) as exc:
            raise GraphBuildError(f"Invalid node-link dependency graph: {exc}") from exc

        if not graph.is_directed():
            raise GraphBuildError("Node-link dependency graph must be directed")
        if graph.is_multigraph():
            graph = nx.DiGraph(graph)

        root_id = graph.graph.get("root")
        if root_id is None:
            roots = [node for node, degree in graph.in_degree() if degree == 0]
            if len(roots) != 1:
                raise GraphBuildError(
                    f"Cannot determine project root; candidates: {roots}"
                )
            root_id = roots[0]
        elif not graph.has_node(root_id):
            raise GraphBuildError(f"Root node {root_id!r} is not in the graph")
        return graph, root_id

    def _to_node(
        self,
        graph: nx.DiGraph,
        node_id: Any,
        base_dir: Optional[Path],
        is_project: bool = False,
    ) -> DependencyNode:
        artifact = self._make_artifact(node_id, graph.nodes[node_id], base_dir)
        children: List[DependencyNode] = [
            self._to_node(graph, child, base_dir) for child in graph.successors(node_id)
        ]
        return DependencyNode(artifact=artifact, children=tuple(children), is_project=is_project)

    def _make_artifact(
        self, node_id: Any, attrs: Dict[str, Any], base_dir: Optional[Path]
    ) -> ArtifactRef:
        missing = [name for name in _REQUIRED_FIELDS if not attrs.get(name)]
        if missing:
            raise GraphBuildError(
                f"Dependency node {node_id!r} is missing {', '.join(missing)}"
            )

        try:
            scope = Scope.parse(attrs.get("scope"))
        except ValueError as exc:
            raise GraphBuildError(
                f"Dependency node {node_id!r} has unknown scope {attrs.get('scope')!r}"
            ) from exc

        file_path: Optional[Path] = None
        if attrs.get("file"):
            file_path = Path(attrs["file"]).expanduser()
            if base_dir is not None and not file_path.is_absolute():
                file_path = base_dir / file_path

        artifact = ArtifactRef(
            group_id=str(attrs["groupId"]),
            artifact_id=str(attrs["artifactId"]),
            version=str(attrs["version"]),
            scope=scope,
            type=attrs.get("type") or "jar",
            classifier=attrs.get("classifier") or None,
            file=file_path,
            container_resolver=self.repository.resolve_container,
        )
        artifact.file = self.repository.locate(artifact)
        return artifact


__all__ = ["DependencyGraphBuilder", "GraphSource"]
