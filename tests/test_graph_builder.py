"""Tests for loading dependency graph documents and repository lookups."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from upstreamjs.errors import ContainerResolutionError, GraphBuildError
from upstreamjs.graph.builder import DependencyGraphBuilder
from upstreamjs.graph.models import ArtifactRef, Scope
from upstreamjs.graph.repository import LocalRepository

MAVEN_TREE = {
    "groupId": "io.acme",
    "artifactId": "dashboard",
    "version": "1.0-SNAPSHOT",
    "type": "hpi",
    "scope": "",
    "classifier": "",
    "optional": "false",
    "children": [
        {
            "groupId": "io.acme",
            "artifactId": "widgets",
            "version": "1.0",
            "type": "jar",
            "scope": "compile",
            "classifier": "",
            "children": [
                {
                    "groupId": "io.acme",
                    "artifactId": "core",
                    "version": "2.1",
                    "scope": "runtime",
                    "file": "libs/core.jar",
                }
            ],
        },
        {
            "groupId": "io.acme",
            "artifactId": "native",
            "version": "1.0",
            "scope": "system",
            "classifier": "linux",
        },
    ],
}


def _builder(tmp_path: Path) -> DependencyGraphBuilder:
    return DependencyGraphBuilder(LocalRepository(tmp_path / "repo"))


def test_maven_tree_document(tmp_path: Path) -> None:
    graph_file = tmp_path / "deps.json"
    graph_file.write_text(json.dumps(MAVEN_TREE), encoding="utf-8")

    root = _builder(tmp_path).build(graph_file)

    assert root.is_project
    assert root.artifact.artifact_id == "dashboard"
    assert root.artifact.scope is Scope.COMPILE
    widgets, native = root.children
    assert not widgets.is_project
    assert widgets.artifact.file == tmp_path / "repo" / "io" / "acme" / "widgets" / "1.0" / "widgets-1.0.jar"
    assert native.artifact.scope is Scope.SYSTEM
    assert native.artifact.file.name == "native-1.0-linux.jar"
    (core,) = widgets.children
    assert core.artifact.scope is Scope.RUNTIME
    assert core.artifact.file == tmp_path / "libs" / "core.jar"
    assert [node.artifact.artifact_id for node in root.walk()] == [
        "dashboard",
        "widgets",
        "core",
        "native",
    ]


def test_node_link_document_with_explicit_root(tmp_path: Path) -> None:
    document = {
        "directed": True,
        "multigraph": False,
        "graph": {"root": "app"},
        "nodes": [
            {"id": "lib-b", "groupId": "g", "artifactId": "b", "version": "1"},
            {"id": "app", "groupId": "g", "artifactId": "app", "version": "1"},
            {"id": "lib-a", "groupId": "g", "artifactId": "a", "version": "1"},
        ],
        "edges": [
            {"source": "app", "target": "lib-a"},
            {"source": "app", "target": "lib-b"},
        ],
    }

    root = _builder(tmp_path).build(document)

    assert root.artifact.artifact_id == "app"
    assert [child.artifact.artifact_id for child in root.children] == ["a", "b"]


def test_node_link_document_infers_root_and_accepts_links(tmp_path: Path) -> None:
    document = {
        "directed": True,
        "nodes": [
            {"id": 1, "groupId": "g", "artifactId": "app", "version": "1"},
            {"id": 2, "groupId": "g", "artifactId": "lib", "version": "1"},
        ],
        "links": [{"source": 1, "target": 2}],
    }

    root = _builder(tmp_path).build(document)

    assert root.artifact.artifact_id == "app"
    assert root.children[0].artifact.artifact_id == "lib"


def test_cyclic_graph_is_rejected(tmp_path: Path) -> None:
    document = {
        "directed": True,
        "graph": {"root": "app"},
        "nodes": [
            {"id": "app", "groupId": "g", "artifactId": "app", "version": "1"},
            {"id": "a", "groupId": "g", "artifactId": "a", "version": "1"},
            {"id": "b", "groupId": "g", "artifactId": "b", "version": "1"},
        ],
        "edges": [
            {"source": "app", "target": "a"},
            {"source": "a", "target": "b"},
            {"source": "b", "target": "a"},
        ],
    }

    with pytest.raises(GraphBuildError, match="cycle"):
        _builder(tmp_path).build(document)


def test_ambiguous_root_is_rejected(tmp_path: Path) -> None:
    document = {
        "directed": True,
        "nodes": [
            {"id": "x", "groupId": "g", "artifactId": "x", "version": "1"},
            {"id": "y", "groupId": "g", "artifactId": "y", "version": "1"},
        ],
        "edges": [],
    }

    with pytest.raises(GraphBuildError, match="root"):
        _builder(tmp_path).build(document)


@pytest.mark.parametrize(
    "document",
    [
        {"groupId": "g", "version": "1"},
        {"groupId": "g", "artifactId": "a", "version": "1", "scope": "bogus"},
        {"groupId": "g", "artifactId": "a", "version": "1", "children": ["oops"]},
    ],
)
def test_malformed_tree_is_rejected(tmp_path: Path, document: dict) -> None:
    with pytest.raises(GraphBuildError):
        _builder(tmp_path).build(document)


def test_unreadable_or_invalid_document(tmp_path: Path) -> None:
    with pytest.raises(GraphBuildError):
        _builder(tmp_path).build(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(GraphBuildError):
        _builder(tmp_path).build(broken)


def test_repository_resolves_container_artifact(tmp_path: Path) -> None:
    repository = LocalRepository(tmp_path / "repo")
    hpi = repository.path_for("io.acme", "widgets", "1.0", "hpi")
    hpi.parent.mkdir(parents=True)
    hpi.write_bytes(b"")
    widgets = ArtifactRef("io.acme", "widgets", "1.0", container_resolver=repository.resolve_container)

    container = widgets.container()

    assert container.type == "hpi"
    assert container.file == hpi
    assert widgets.container() is container


def test_repository_without_container_raises(tmp_path: Path) -> None:
    repository = LocalRepository(tmp_path / "repo")
    widgets = ArtifactRef("io.acme", "widgets", "1.0", container_resolver=repository.resolve_container)

    with pytest.raises(ContainerResolutionError):
        widgets.container()


def test_container_is_resolved_lazily_once() -> None:
    calls = []

    def resolve(artifact: ArtifactRef) -> ArtifactRef:
        calls.append(artifact)
        return ArtifactRef(artifact.group_id, artifact.artifact_id, artifact.version, type="hpi")

    widgets = ArtifactRef("io.acme", "widgets", "1.0", container_resolver=resolve)
    assert calls == []

    widgets.container()
    widgets.container()

    assert calls == [widgets]


def test_artifact_string_form() -> None:
    artifact = ArtifactRef("io.acme", "native", "1.0", scope=Scope.SYSTEM, classifier="linux")
    assert str(artifact) == "io.acme:native:jar:linux:1.0:system"
