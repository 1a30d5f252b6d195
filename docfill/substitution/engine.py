"""Substitution engine.

Replaces placeholders in a decoded text body with rendered values. All
matches are located against the original body before anything is
replaced, so inserted values are never scanned again.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from docfill.logger import Logger
from docfill.substitution.scanner import PlaceholderMatch, PlaceholderScanner
from docfill.validation.models import DocumentFormat
from docfill.validation.validator import render_value


class SubstitutionResult(BaseModel):
    """Substituted text plus per-name replacement counts."""

    text: str
    replacements: Dict[str, int] = Field(default_factory=dict)

    @property
    def total_replacements(self) -> int:
        return sum(self.replacements.values())


class SubstitutionEngine:
    """Applies a value map to a text body.

    Placeholders whose name is not in the value map stay untouched.
    """

    def __init__(self, split_tokens: bool = False, logger: Optional[Logger] = None):
        self.scanner = PlaceholderScanner(split_tokens=split_tokens)
        self.logger = logger

    @classmethod
    def for_format(
        cls, document_format: DocumentFormat, logger: Optional[Logger] = None
    ) -> "SubstitutionEngine":
        """Engine configured for a document family.

        Word editors fragment runs of text, so the split-token heuristic is
        only switched on for Word.
        """
        return cls(split_tokens=document_format == DocumentFormat.WORD, logger=logger)

    def substitute(self, body: str, values: Mapping[str, Any]) -> str:
        return self.apply(body, values).text

    def apply(self, body: str, values: Mapping[str, Any]) -> SubstitutionResult:
        rendered = {name: render_value(value) for name, value in values.items() if name}
        chosen = self._select(self._collect(body, rendered))

        parts: List[str] = []
        counts: Dict[str, int] = {}
        cursor = 0
        for match in chosen:
            parts.append(body[cursor : match.start])
            parts.append(rendered[match.name])
            counts[match.name] = counts.get(match.name, 0) + 1
            cursor = match.end
        parts.append(body[cursor:])

        if self.logger:
            self.logger.debug(
                "Substitution applied",
                names=len(rendered),
                replacements=sum(counts.values()),
            )
        return SubstitutionResult(text="".join(parts), replacements=counts)

    def _collect(self, body: str, rendered: Mapping[str, str]) -> List[PlaceholderMatch]:
        matches: List[PlaceholderMatch] = []
        for name in rendered:
            matches.extend(self.scanner.iter_matches(body, name))
        return matches

    @staticmethod
    def _select(matches: List[PlaceholderMatch]) -> List[PlaceholderMatch]:
        """Pick non-overlapping matches, left to right.

        With split tokens one span can match several names (``{{a_b}}``
        contains ``a``). An exact match wins, then the longest name, then the
        alphabetically first, which keeps the result independent of the
        value map's ordering.
        """
        ordered = sorted(
            matches, key=lambda m: (m.start, not m.exact, -len(m.name), m.name)
        )
        chosen: List[PlaceholderMatch] = []
        last_end = -1
        for match in ordered:
            if match.start < last_end:
                continue
            chosen.append(match)
            last_end = match.end
        return chosen
