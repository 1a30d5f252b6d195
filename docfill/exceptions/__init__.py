"""Custom exceptions for the docfill service.

All exceptions carry a ``code`` so the web layer can map them without
inspecting message text.
"""

from docfill.exceptions.base import (
    DocfillError,
    ValidationError,
    ResourceNotFoundError,
    SecurityError,
    ConfigurationError,
    StorageError,
)
from docfill.exceptions.parameter import (
    DuplicateParameterNameError,
    InvalidParameterDefinitionError,
)
from docfill.exceptions.template import (
    TemplateNotFoundError,
    TemplateUnavailableError,
    UnsupportedTemplateError,
)
from docfill.exceptions.storage import (
    ObjectNotFoundError,
    StorageReadError,
    StorageWriteError,
    InvalidObjectKeyError,
)
from docfill.exceptions.generation import (
    UnauthorizedError,
    ForbiddenError,
    GenerationFailedError,
    GenerationNotFoundError,
)

__all__ = [
    # Base exceptions
    "DocfillError",
    "ValidationError",
    "ResourceNotFoundError",
    "SecurityError",
    "ConfigurationError",
    "StorageError",
    # Parameters
    "DuplicateParameterNameError",
    "InvalidParameterDefinitionError",
    # Templates
    "TemplateNotFoundError",
    "TemplateUnavailableError",
    "UnsupportedTemplateError",
    # Storage
    "ObjectNotFoundError",
    "StorageReadError",
    "StorageWriteError",
    "InvalidObjectKeyError",
    # Generation
    "UnauthorizedError",
    "ForbiddenError",
    "GenerationFailedError",
    "GenerationNotFoundError",
]
