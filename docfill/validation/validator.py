"""Parameter value validation and parameter definition checks."""

import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from docfill.exceptions import DuplicateParameterNameError, InvalidParameterDefinitionError
from docfill.validation.error import (
    INVALID_FORMAT,
    MISSING_REQUIRED,
    ParameterIssue,
    ValidationResult,
)
from docfill.validation.models import ParameterType, TemplateParameter

PARAMETER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
MAX_PARAMETER_NAME_LENGTH = 100
MAX_PARAMETER_LABEL_LENGTH = 200
MAX_DEFAULT_VALUE_LENGTH = 500

_EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Za-z0-9!#$%&'*+/=?^_`{|}~.\-]+(?<!\.)"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?\.)+"
    r"[A-Za-z0-9](?:[A-Za-z0-9\-]*[A-Za-z0-9])?$"
)
_DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def render_value(value: Any) -> str:
    """Canonical string form of a submitted value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_PATTERN.match(value))


def is_valid_number(value: str) -> bool:
    if not _DECIMAL_PATTERN.match(value):
        return False
    return math.isfinite(float(value))


class ParameterValidator:
    """Checks a value map against an ordered parameter schema.

    Parameters are visited in declaration order and every issue is
    collected, so the first reported error is stable for a given input.
    """

    def validate(
        self, parameters: Sequence[TemplateParameter], values: Mapping[str, Any]
    ) -> ValidationResult:
        errors: List[ParameterIssue] = []
        for parameter in parameters:
            issue = self._check(parameter, values.get(parameter.name))
            if issue is not None:
                errors.append(issue)
        return ValidationResult(is_valid=not errors, errors=errors)

    def _check(self, parameter: TemplateParameter, raw: Any) -> Optional[ParameterIssue]:
        value = render_value(raw).strip()

        if not value:
            if parameter.required:
                return ParameterIssue(
                    parameter=parameter.name,
                    label=parameter.label,
                    kind=MISSING_REQUIRED,
                    message=f"Missing required parameter: {parameter.label}",
                )
            return None

        if parameter.type == ParameterType.EMAIL and not is_valid_email(value):
            return ParameterIssue(
                parameter=parameter.name,
                label=parameter.label,
                kind=INVALID_FORMAT,
                expected="email",
                message=f"{parameter.label} must be a valid email",
            )

        if parameter.type == ParameterType.NUMBER and not is_valid_number(value):
            return ParameterIssue(
                parameter=parameter.name,
                label=parameter.label,
                kind=INVALID_FORMAT,
                expected="number",
                message=f"{parameter.label} must be a number",
            )

        # date, text and textarea only need to be present
        return None


def check_parameter_definitions(parameters: Iterable[TemplateParameter]) -> None:
    """Validate parameter definitions at template creation time.

    Raises:
        InvalidParameterDefinitionError: name or label is malformed
        DuplicateParameterNameError: two parameters share a name
    """
    seen = set()
    for parameter in parameters:
        name = parameter.name.strip()
        if not name:
            raise InvalidParameterDefinitionError("Parameter name is required")
        if len(name) > MAX_PARAMETER_NAME_LENGTH:
            raise InvalidParameterDefinitionError(
                f"Parameter name '{name[:20]}...' exceeds {MAX_PARAMETER_NAME_LENGTH} characters",
                parameter_name=name,
            )
        if not PARAMETER_NAME_PATTERN.match(name):
            raise InvalidParameterDefinitionError(
                f"Parameter name '{name}' may only contain letters, digits and underscores",
                parameter_name=name,
            )
        if not parameter.label.strip():
            raise InvalidParameterDefinitionError(
                f"Parameter '{name}' needs a label", parameter_name=name
            )
        if len(parameter.label.strip()) > MAX_PARAMETER_LABEL_LENGTH:
            raise InvalidParameterDefinitionError(
                f"Label of parameter '{name}' exceeds {MAX_PARAMETER_LABEL_LENGTH} characters",
                parameter_name=name,
            )
        if parameter.default is not None and len(parameter.default.strip()) > MAX_DEFAULT_VALUE_LENGTH:
            raise InvalidParameterDefinitionError(
                f"Default of parameter '{name}' exceeds {MAX_DEFAULT_VALUE_LENGTH} characters",
                parameter_name=name,
            )
        if name in seen:
            raise DuplicateParameterNameError(name)
        seen.add(name)
