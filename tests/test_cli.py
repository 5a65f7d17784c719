"""Tests for upstreamjs CLI entrypoints."""

from __future__ import annotations

import io
import json
import zipfile
from pathlib import Path

import pytest

import upstreamjs.main as main


def _write_jar(path: Path, entries: dict) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as jar:
        for name, data in entries.items():
            jar.writestr(name, data)
    path.write_bytes(buffer.getvalue())


def _graph(tmp_path: Path, children: list) -> Path:
    graph_file = tmp_path / "deps.json"
    graph_file.write_text(
        json.dumps({"groupId": "g", "artifactId": "app", "version": "1", "children": children}),
        encoding="utf-8",
    )
    return graph_file


def test_install_command_writes_modules(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    _write_jar(tmp_path / "widgets.jar", {"package.json": b'{"name": "widgets"}', "index.js": b"1"})
    graph_file = _graph(
        tmp_path, [{"groupId": "g", "artifactId": "widgets", "version": "1", "file": "widgets.jar"}]
    )

    exit_code = main.main(
        [
            "install",
            str(graph_file),
            "--base-dir",
            str(tmp_path),
            "--node-modules-dir",
            str(tmp_path / "out"),
        ]
    )

    assert exit_code == 0
    assert (tmp_path / "out" / "widgets" / "index.js").read_bytes() == b"1"


def test_install_command_reports_fatal_errors(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)
    (tmp_path / "package.json").write_text("{}", encoding="utf-8")
    _write_jar(tmp_path / "broken.jar", {"package.json": b'{"version": "1"}'})
    graph_file = _graph(
        tmp_path, [{"groupId": "g", "artifactId": "broken", "version": "1", "file": "broken.jar"}]
    )

    exit_code = main.main(["install", str(graph_file), "--base-dir", str(tmp_path)])

    assert exit_code == 1


def test_main_requires_command(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Ensure missing subcommands make the CLI print help and fail."""

    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)

    exit_code = main.main([])

    assert exit_code == 1
    assert "Upstreamjs" in capsys.readouterr().out
