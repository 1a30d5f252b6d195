"""Placeholder scanning and substitution."""

from docfill.substitution.engine import SubstitutionEngine, SubstitutionResult
from docfill.substitution.scanner import (
    PlaceholderMatch,
    PlaceholderScanner,
    count_placeholders,
    find_placeholder_names,
)

__all__ = [
    "SubstitutionEngine",
    "SubstitutionResult",
    "PlaceholderMatch",
    "PlaceholderScanner",
    "count_placeholders",
    "find_placeholder_names",
]
