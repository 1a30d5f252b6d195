"""Base exception classes for docfill.

Every error carries a machine-readable ``code``, a human-readable
``message`` and an optional ``details`` mapping.
"""

from typing import Any, Dict, Optional


class DocfillError(Exception):
    """Root of the docfill exception hierarchy."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(DocfillError):
    """Input failed validation."""


class ResourceNotFoundError(DocfillError):
    """A requested resource does not exist."""


class SecurityError(DocfillError):
    """Caller is not allowed to perform the operation."""


class ConfigurationError(DocfillError):
    """Service is misconfigured."""


class StorageError(DocfillError):
    """A storage collaborator failed."""
