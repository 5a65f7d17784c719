"""Restricted glob matching over archive entry paths.

Only two wildcards are understood:

* ``*``  matches any run of characters except ``/``
* ``**`` matches any run of characters, ``/`` included

Entry paths always use ``/`` as separator, whatever the host platform.
A match is always a full-string match.

Examples:
    >>> GlobMatcher("a/*.json").matches("a/x.json")
    True
    >>> GlobMatcher("a/*.json").matches("a/b/x.json")
    False
    >>> GlobMatcher("**/x.json").matches("a/b/x.json")
    True
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from upstreamjs.errors import ConfigurationError

logger = logging.getLogger("upstreamjs.archive.glob")

# Glob syntax this matcher deliberately does not implement.
UNSUPPORTED_CHARS = frozenset("?[]{}")


class TokenKind(str, Enum):
    """Kind of a glob pattern segment."""

    LITERAL = "literal"
    STAR = "star"
    DOUBLE_STAR = "double_star"


@dataclass(frozen=True)
class GlobToken:
    """One segment of a tokenized glob pattern."""

    kind: TokenKind
    text: str = ""


_WILDCARD_REGEX = {
    TokenKind.STAR: "[^/]*",
    TokenKind.DOUBLE_STAR: ".*",
}


def tokenize(pattern: str) -> List[GlobToken]:
    """Split a glob pattern into literal and wildcard tokens.

    Args:
        pattern: Glob pattern.

    Returns:
        List[GlobToken]: Tokens in pattern order.

    Raises:
        ConfigurationError: If the pattern uses unsupported glob syntax.
    """
    tokens: List[GlobToken] = []
    literal: List[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char in UNSUPPORTED_CHARS:
            raise ConfigurationError(
                f"Unsupported glob syntax {char!r} at offset {i} in pattern {pattern!r}"
            )
        if char != "*":
            literal.append(char)
            i += 1
            continue

        run = 1
        while i + run < len(pattern) and pattern[i + run] == "*":
            run += 1
        if run > 2:
            raise ConfigurationError(
                f"Unsupported wildcard {'*' * run!r} in pattern {pattern!r}"
            )

        if literal:
            tokens.append(GlobToken(TokenKind.LITERAL, "".join(literal)))
            literal = []
        tokens.append(GlobToken(TokenKind.DOUBLE_STAR if run == 2 else TokenKind.STAR))
        i += run

    if literal:
        tokens.append(GlobToken(TokenKind.LITERAL, "".join(literal)))
    return tokens


class GlobMatcher:
    """Full-string matcher for a restricted glob pattern."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.tokens: Tuple[GlobToken, ...] = tuple(tokenize(pattern))
        self._regex = re.compile(self._to_regex(self.tokens), re.DOTALL)

    @staticmethod
    def _to_regex(tokens: Tuple[GlobToken, ...]) -> str:
        parts = []
        for token in tokens:
            if token.kind is TokenKind.LITERAL:
                parts.append(re.escape(token.text))
            else:
                parts.append(_WILDCARD_REGEX[token.kind])
        return "".join(parts)

    def matches(self, path: str) -> bool:
        """Return True when ``path`` matches the whole pattern."""
        return self._regex.fullmatch(path) is not None

    def __call__(self, path: str) -> bool:
        return self.matches(path)

    def __repr__(self) -> str:
        return f"GlobMatcher({self.pattern!r})"


__all__ = ["GlobMatcher", "GlobToken", "TokenKind", "UNSUPPORTED_CHARS", "tokenize"]
