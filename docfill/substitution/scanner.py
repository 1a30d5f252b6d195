"""Placeholder scanning.

A placeholder is ``{{name}}`` with optional whitespace just inside the
braces. Word bodies may additionally have markup injected between the
braces and the name when an editor splits one word into several runs; the
split-token mode treats any ``{{...}}`` span whose interior (with no
closing brace) contains the name as a match.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Pattern, Tuple

_ANY_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")


@dataclass(frozen=True)
class PlaceholderMatch:
    """A matched span ``body[start:end]`` referring to ``name``."""

    name: str
    start: int
    end: int
    exact: bool


class PlaceholderScanner:
    """Finds placeholder spans for a parameter name.

    Args:
        split_tokens: Enable the split-token heuristic (Word family).
            It can over-match when the name is a substring of other text
            between braces.
    """

    def __init__(self, split_tokens: bool = False):
        self.split_tokens = split_tokens

    @staticmethod
    def pattern_for(name: str) -> Pattern[str]:
        """Canonical ``{{ name }}`` pattern."""
        return re.compile(r"\{\{(\s*" + re.escape(name) + r"\s*)\}\}")

    def iter_matches(self, body: str, name: str) -> Iterator[PlaceholderMatch]:
        """Lazily yield non-overlapping matches of ``name`` in ``body``.

        Each call starts a fresh scan.
        """
        if not name:
            return
        if self.split_tokens:
            spans = _split_spans(body, name)
        else:
            spans = ((m.start(), m.end(), m.group(1)) for m in self.pattern_for(name).finditer(body))
        for start, end, interior in spans:
            yield PlaceholderMatch(
                name=name,
                start=start,
                end=end,
                exact=interior.strip() == name,
            )

    def find_spans(self, body: str, name: str) -> List[tuple]:
        return [(m.start, m.end) for m in self.iter_matches(body, name)]


def _split_spans(body: str, name: str) -> Iterator[Tuple[int, int, str]]:
    """``{{...}}`` spans with no ``}`` inside whose interior contains ``name``.

    Every ``{{`` between a failed start and its first ``}`` shares that
    ``}`` and sees a shorter interior, so the scan resumes after it. Each
    character is examined a bounded number of times.
    """
    pos = 0
    while True:
        start = body.find("{{", pos)
        if start < 0:
            return
        close = body.find("}", start + 2)
        if close < 0:
            return
        interior = body[start + 2:close]
        if body.startswith("}}", close) and name in interior:
            yield start, close + 2, interior
            pos = close + 2
        else:
            pos = close + 1


def find_placeholder_names(body: str) -> List[str]:
    """Distinct well-formed placeholder names in order of first appearance."""
    names: List[str] = []
    for match in _ANY_PLACEHOLDER.finditer(body):
        if match.group(1) not in names:
            names.append(match.group(1))
    return names


def count_placeholders(body: str) -> int:
    """Number of well-formed placeholders in ``body``."""
    return sum(1 for _ in _ANY_PLACEHOLDER.finditer(body))
