"""Validation module for docfill.

- models/: pydantic data model
- validator.py: value checks at generation time, definition checks at upload
- error.py: issue and result models
"""

from docfill.validation.error import (
    INVALID_FORMAT,
    MISSING_REQUIRED,
    ParameterIssue,
    ValidationResult,
)
from docfill.validation.validator import (
    ParameterValidator,
    check_parameter_definitions,
    is_valid_email,
    is_valid_number,
    render_value,
)

__all__ = [
    "INVALID_FORMAT",
    "MISSING_REQUIRED",
    "ParameterIssue",
    "ValidationResult",
    "ParameterValidator",
    "check_parameter_definitions",
    "is_valid_email",
    "is_valid_number",
    "render_value",
]
