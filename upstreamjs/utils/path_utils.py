"""Path helpers for writing archive contents to disk."""

import os
from pathlib import Path
from typing import Union


def normalize(path: Union[str, Path]) -> Path:
    """Lexically normalize a path, collapsing ``.`` and ``..`` segments.

    Symlinks are not resolved and the path does not need to exist.
    """
    return Path(os.path.normpath(os.fspath(path)))


def is_within(path: Union[str, Path], root: Union[str, Path]) -> bool:
    """Return True when normalized ``path`` is ``root`` or lies below it.

    Examples:
        >>> is_within("/out/pkg/lib/a.js", "/out/pkg")
        True
        >>> is_within("/out/pkg/../../escape.txt", "/out/pkg")
        False
        >>> is_within("/out/pkg-evil/a.js", "/out/pkg")
        False
    """
    return normalize(path).is_relative_to(normalize(root))
