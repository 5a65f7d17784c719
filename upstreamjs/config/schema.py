"""Configuration schema definitions using Pydantic for validation.

Configuration errors are reported when the model is built, before any
dependency graph is loaded or any file is written.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from upstreamjs.archive.glob import UNSUPPORTED_CHARS
from upstreamjs.graph.models import Scope
from upstreamjs.graph.repository import DEFAULT_LOCAL_REPOSITORY


class InstallConfig(BaseModel):
    """Settings for one upstream module install run.

    Attributes:
        base_dir: Project directory; must contain ``package.json`` for the
            run to do anything.
        node_modules_dir: Output directory. Defaults to ``<base_dir>/node_modules``.
        local_repository: Maven-layout repository used to locate artifacts.
        descriptor_name: Module descriptor file name.
        container_type: Packaging type of plugin container artifacts.
        skip_scopes: Dependency scopes that are never inspected.
    """

    base_dir: Path = Path(".")
    node_modules_dir: Optional[Path] = None
    local_repository: Path = DEFAULT_LOCAL_REPOSITORY
    descriptor_name: str = Field(default="package.json", min_length=1)
    container_type: str = Field(default="hpi", min_length=1)
    skip_scopes: List[str] = Field(default_factory=lambda: [Scope.SYSTEM.value])

    model_config = {"extra": "forbid"}

    @field_validator("skip_scopes")
    @classmethod
    def validate_scopes(cls, v: List[str]) -> List[str]:
        """Validate that skipped scopes are valid Maven scopes."""
        valid_scopes = {scope.value for scope in Scope}
        for scope in v:
            if scope not in valid_scopes:
                raise ValueError(
                    f"Invalid Maven scope '{scope}'. Valid scopes: {sorted(valid_scopes)}"
                )
        return v

    @field_validator("descriptor_name")
    @classmethod
    def validate_descriptor_name(cls, v: str) -> str:
        """The descriptor is matched as a literal archive path."""
        bad = sorted(c for c in set(v) if c == "*" or c in UNSUPPORTED_CHARS)
        if bad:
            raise ValueError(
                f"descriptor_name must not contain wildcard or pattern characters: {bad}"
            )
        return v

    @property
    def output_dir(self) -> Path:
        """Directory receiving the installed modules."""
        if self.node_modules_dir is not None:
            return self.node_modules_dir
        return self.base_dir / "node_modules"

    @property
    def marker_file(self) -> Path:
        return self.base_dir / self.descriptor_name

    @property
    def skipped_scopes(self) -> List[Scope]:
        return [Scope(scope) for scope in self.skip_scopes]
