"""Upstream module discovery over the dependency tree."""

from upstreamjs.collect.collector import CollectOutcome, DependencyCollector, Inspection

__all__ = ["CollectOutcome", "DependencyCollector", "Inspection"]
