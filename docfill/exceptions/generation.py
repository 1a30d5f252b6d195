"""Generation pipeline exceptions."""

from typing import Optional

from docfill.exceptions.base import DocfillError, ResourceNotFoundError, SecurityError


class UnauthorizedError(SecurityError):
    """No authenticated principal is attached to the call."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(code="UNAUTHORIZED", message=message)


class ForbiddenError(SecurityError):
    """Principal is authenticated but does not own the resource."""

    def __init__(self, message: str, resource_id: Optional[str] = None):
        super().__init__(code="FORBIDDEN", message=message, details={"resource_id": resource_id})


class GenerationFailedError(DocfillError):
    """A generation request ended in the Failed state.

    ``reason`` is the failure code recorded on the request; ``cause`` is the
    collaborator or validation error that triggered it, when there was one.
    """

    def __init__(
        self,
        reason: str,
        message: str,
        generation_id: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            code=reason,
            message=message,
            details={"generation_id": generation_id},
        )
        self.reason = reason
        self.generation_id = generation_id
        self.cause = cause


class GenerationNotFoundError(ResourceNotFoundError):
    def __init__(self, generation_id: str):
        super().__init__(
            code="GENERATION_NOT_FOUND",
            message="Generation not found",
            details={"generation_id": generation_id},
        )
