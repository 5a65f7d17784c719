"""Extracts collected modules into an npm-compatible ``node_modules`` tree.

Each module lands in ``<output root>/<name segment>/.../`` where the
segments come from the ``name`` field of its ``package.json``; a scoped
name such as ``@scope/pkg`` becomes ``<output root>/@scope/pkg``.

Files are only (re)written when missing or older than the artifact file,
so repeated runs against unchanged artifacts write nothing.
"""

from __future__ import annotations

import json
import logging
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple

from upstreamjs.archive.scanner import (
    CORRUPT_DATA_ERRORS,
    ArchiveScanner,
    iter_files,
    open_archive,
)
from upstreamjs.errors import ArchiveSecurityError, ConfigurationError, MaterializationError
from upstreamjs.graph.models import ArtifactRef
from upstreamjs.utils.path_utils import is_within

logger = logging.getLogger("upstreamjs.install.materializer")

DESCRIPTOR_NAME = "package.json"


@dataclass(frozen=True)
class ModuleDescriptor:
    """Module metadata read from ``package.json``; only ``name`` is used."""

    name: str

    @classmethod
    def parse(cls, content: bytes, origin: str = "package.json") -> "ModuleDescriptor":
        """Parse descriptor bytes.

        Raises:
            ConfigurationError: If the content is not a JSON object with a
                usable ``name``.
        """
        try:
            data = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Unparseable module descriptor in {origin}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError(f"Module descriptor in {origin} is not a JSON object")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Module descriptor in {origin} has no name")
        if any(segment in ("", ".", "..") for segment in name.split("/")):
            raise ConfigurationError(f"Invalid module name {name!r} in {origin}")
        return cls(name=name)

    @property
    def segments(self) -> Tuple[str, ...]:
        return tuple(self.name.split("/"))


@dataclass
class MaterializeStats:
    """Counts of files written and skipped during one materialization."""

    copied: int = 0
    skipped: int = 0
    modules: int = 0


class ModuleMaterializer:
    """Writes the contents of module artifacts into an output tree."""

    def __init__(
        self, scanner: ArchiveScanner | None = None, descriptor_name: str = DESCRIPTOR_NAME
    ) -> None:
        self.scanner = scanner or ArchiveScanner()
        self.descriptor_name = descriptor_name

    def materialize(self, artifacts: Iterable[ArtifactRef], output_root: Path) -> MaterializeStats:
        """Materialize every artifact, in order, below ``output_root``.

        Raises:
            ConfigurationError: If a module descriptor is missing or invalid.
            MaterializationError: On any filesystem failure or unsafe entry.
        """
        stats = MaterializeStats()
        for artifact in artifacts:
            self.materialize_one(artifact, Path(output_root), stats)
        return stats

    def read_descriptor(self, artifact: ArtifactRef) -> ModuleDescriptor:
        """Read the module descriptor packaged in ``artifact``."""
        source = self._source_file(artifact)
        try:
            entry = self.scanner.scan_first(source, self.descriptor_name)
        except OSError as exc:
            raise MaterializationError(
                f"Unable to read {self.descriptor_name} from {artifact}: {exc}", path=source
            ) from exc
        if entry is None:
            raise ConfigurationError(f"No {self.descriptor_name} found in {artifact}")
        return ModuleDescriptor.parse(entry.data, origin=f"{artifact} ({entry.path})")

    def module_dir(self, descriptor: ModuleDescriptor, output_root: Path) -> Path:
        return output_root.joinpath(*descriptor.segments)

    def materialize_one(
        self, artifact: ArtifactRef, output_root: Path, stats: MaterializeStats
    ) -> Path:
        """Extract one artifact and return its module directory."""
        descriptor = self.read_descriptor(artifact)
        source = self._source_file(artifact)
        out_dir = self.module_dir(descriptor, output_root)

        try:
            out_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise MaterializationError(
                f"Unable to make module output directory: {out_dir}", path=out_dir
            ) from exc

        try:
            artifact_mtime = source.stat().st_mtime
            with open_archive(source) as archive:
                for info in iter_files(archive):
                    if self._copy_entry(archive, info, out_dir, artifact_mtime):
                        stats.copied += 1
                    else:
                        stats.skipped += 1
        except OSError as exc:
            raise MaterializationError(
                f"Unable to extract {artifact} to {out_dir}: {exc}", path=source
            ) from exc

        stats.modules += 1
        logger.info("Installed %s from %s", descriptor.name, artifact)
        return out_dir

    def _copy_entry(
        self,
        archive: zipfile.ZipFile,
        info: zipfile.ZipInfo,
        out_dir: Path,
        artifact_mtime: float,
    ) -> bool:
        out_file = out_dir / info.filename
        if not is_within(out_file, out_dir):
            raise ArchiveSecurityError(
                f"Archive entry {info.filename!r} escapes {out_dir}", path=out_file
            )

        if out_file.exists() and out_file.stat().st_mtime >= artifact_mtime:
            return False

        logger.debug("Copying file: %s", out_file)
        try:
            out_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise MaterializationError(
                f"Unable to make parent directory for: {out_file}", path=out_file
            ) from exc

        try:
            with archive.open(info) as src, open(out_file, "wb") as dst:
                shutil.copyfileobj(src, dst)
        except (OSError, *CORRUPT_DATA_ERRORS) as exc:
            raise MaterializationError(f"Unable to write {out_file}: {exc}", path=out_file) from exc
        return True

    @staticmethod
    def _source_file(artifact: ArtifactRef) -> Path:
        try:
            return artifact.require_file()
        except FileNotFoundError as exc:
            raise MaterializationError(str(exc)) from exc


__all__ = [
    "DESCRIPTOR_NAME",
    "MaterializeStats",
    "ModuleDescriptor",
    "ModuleMaterializer",
]
