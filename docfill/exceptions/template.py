"""Template exceptions."""

from typing import Optional

from docfill.exceptions.base import ResourceNotFoundError, StorageError, ValidationError


class TemplateNotFoundError(ResourceNotFoundError):
    """Raised when no template record exists for an id."""

    def __init__(self, template_id: str):
        super().__init__(
            code="TEMPLATE_NOT_FOUND",
            message="Template not found",
            details={"template_id": template_id},
        )
        self.template_id = template_id


class TemplateUnavailableError(StorageError):
    """The template record exists but its bytes could not be fetched."""

    def __init__(self, template_id: str, reason: Optional[str] = None):
        super().__init__(
            code="TEMPLATE_UNAVAILABLE",
            message="Failed to download template file",
            details={"template_id": template_id, "reason": reason},
        )
        self.template_id = template_id


class UnsupportedTemplateError(ValidationError):
    """The template body cannot be processed (unknown type, corrupt package)."""

    def __init__(self, message: str, file_type: Optional[str] = None):
        super().__init__(
            code="UNSUPPORTED_TEMPLATE",
            message=message,
            details={"file_type": file_type},
        )
