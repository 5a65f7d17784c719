"""Configuration schema and validation for upstreamjs."""

from .schema import InstallConfig

__all__ = ["InstallConfig"]
