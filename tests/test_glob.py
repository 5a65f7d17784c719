"""Tests for restricted glob matching over archive entry paths."""

from __future__ import annotations

import re

import pytest

from upstreamjs.archive.glob import GlobMatcher, GlobToken, TokenKind, tokenize
from upstreamjs.errors import ConfigurationError


def _reference_regex(pattern: str) -> "re.Pattern[str]":
    """Straightforward regex translation used as an oracle."""
    parts = re.split(r"(\*\*|\*)", pattern)
    out = []
    for part in parts:
        if part == "**":
            out.append(".*")
        elif part == "*":
            out.append("[^/]*")
        else:
            out.append(re.escape(part))
    return re.compile("".join(out), re.DOTALL)


def test_single_star_does_not_cross_directories() -> None:
    matcher = GlobMatcher("a/*.json")
    assert matcher.matches("a/x.json")
    assert matcher.matches("a/.json")
    assert not matcher.matches("a/b/x.json")


def test_double_star_crosses_directories() -> None:
    matcher = GlobMatcher("**/x.json")
    assert matcher.matches("a/x.json")
    assert matcher.matches("a/b/x.json")
    assert not matcher.matches("a/b/y.json")


def test_literal_pattern_is_full_match_only() -> None:
    matcher = GlobMatcher("package.json")
    assert matcher.matches("package.json")
    assert not matcher.matches("lib/package.json")
    assert not matcher.matches("package.json.bak")
    assert not matcher.matches("xpackage.json")


def test_literal_fragments_are_escaped() -> None:
    matcher = GlobMatcher("lib/a+b(c).json")
    assert matcher.matches("lib/a+b(c).json")
    assert not matcher.matches("lib/aab(c).json")
    assert not GlobMatcher("a.json").matches("aXjson")


def test_patterns_starting_and_ending_with_wildcards() -> None:
    assert GlobMatcher("**").matches("")
    assert GlobMatcher("**").matches("a/b/c")
    assert GlobMatcher("*").matches("abc")
    assert not GlobMatcher("*").matches("a/b")
    assert GlobMatcher("**.js").matches("a/b.js")
    assert GlobMatcher("META-INF/**").matches("META-INF/maven/pom.xml")


def test_tokenize_splits_literals_and_wildcards() -> None:
    assert tokenize("**/lib/*.js") == [
        GlobToken(TokenKind.DOUBLE_STAR),
        GlobToken(TokenKind.LITERAL, "/lib/"),
        GlobToken(TokenKind.STAR),
        GlobToken(TokenKind.LITERAL, ".js"),
    ]
    assert tokenize("*.*") == [
        GlobToken(TokenKind.STAR),
        GlobToken(TokenKind.LITERAL, "."),
        GlobToken(TokenKind.STAR),
    ]


@pytest.mark.parametrize("pattern", ["a?.json", "[ab].json", "{a,b}.json", "a/***"])
def test_unsupported_syntax_fails_fast(pattern: str) -> None:
    with pytest.raises(ConfigurationError):
        GlobMatcher(pattern)


@pytest.mark.parametrize(
    "pattern",
    ["a/*.json", "**/x.json", "WEB-INF/lib/widgets.jar", "*/*", "**/META-INF/*.properties", "a**b"],
)
def test_agrees_with_reference_translation(pattern: str) -> None:
    paths = [
        "",
        "a/x.json",
        "a/b/x.json",
        "x.json",
        "WEB-INF/lib/widgets.jar",
        "WEB-INF/lib/sub/widgets.jar",
        "one/two",
        "one/two/three",
        "foo/META-INF/a.properties",
        "META-INF/a.properties",
        "ab",
        "a/b",
        "a/zzz/b",
    ]
    matcher = GlobMatcher(pattern)
    reference = _reference_regex(pattern)
    for path in paths:
        assert matcher.matches(path) == (reference.fullmatch(path) is not None), path
