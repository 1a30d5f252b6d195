"""Parameter validation issue models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict

MISSING_REQUIRED = "MISSING_REQUIRED"
INVALID_FORMAT = "INVALID_FORMAT"


class ParameterIssue(BaseModel):
    """One parameter that failed validation."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "parameter": "contact_email",
                "label": "Contact email",
                "kind": "INVALID_FORMAT",
                "expected": "email",
                "message": "Contact email must be a valid email",
            }
        }
    )

    parameter: str
    label: str
    kind: str
    expected: Optional[str] = None
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating a value map; issues are in declaration order."""

    is_valid: bool
    errors: List[ParameterIssue] = []

    @property
    def first_error(self) -> Optional[ParameterIssue]:
        return self.errors[0] if self.errors else None

    def get_error_summary(self) -> str:
        """Get a formatted summary of all errors"""
        if not self.errors:
            return "No errors"
        return "; ".join(f"{issue.parameter}: {issue.message}" for issue in self.errors)
