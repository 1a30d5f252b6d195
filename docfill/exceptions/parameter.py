"""Parameter-related exceptions."""

from typing import Optional

from docfill.exceptions.base import ValidationError


class DuplicateParameterNameError(ValidationError):
    """Two parameters of one template share a name."""

    def __init__(self, parameter_name: str, template_id: Optional[str] = None):
        super().__init__(
            code="DUPLICATE_PARAMETER_NAME",
            message=f"Parameter name '{parameter_name}' already exists",
            details={"parameter": parameter_name, "template_id": template_id},
        )
        self.parameter_name = parameter_name


class InvalidParameterDefinitionError(ValidationError):
    """A parameter definition is malformed (bad name, missing label, ...)."""

    def __init__(self, message: str, parameter_name: Optional[str] = None):
        super().__init__(
            code="INVALID_PARAMETER_DEFINITION",
            message=message,
            details={"parameter": parameter_name},
        )
