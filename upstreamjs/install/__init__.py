"""Module materialization into a node_modules tree."""

from upstreamjs.install.materializer import (
    MaterializeStats,
    ModuleDescriptor,
    ModuleMaterializer,
)

__all__ = ["MaterializeStats", "ModuleDescriptor", "ModuleMaterializer"]
