"""Pydantic models for docfill.

- common.py: enums and the error response
- schema.py: template and parameter schemas
- generation.py: generation requests and pipeline states
- inputs.py: request bodies for the web server
"""

from .common import (
    CONTENT_TYPES,
    FILE_TYPE_FORMATS,
    DocumentFormat,
    ErrorResponse,
    ParameterType,
)
from .generation import (
    STATE_ORDER,
    FailureReason,
    GenerationOutcome,
    GenerationRequest,
    GenerationState,
)
from .inputs import CreateTemplateInput, GenerateDocumentInput
from .schema import TemplateDocument, TemplateParameter

__all__ = [
    "CONTENT_TYPES",
    "FILE_TYPE_FORMATS",
    "DocumentFormat",
    "ErrorResponse",
    "ParameterType",
    "STATE_ORDER",
    "FailureReason",
    "GenerationOutcome",
    "GenerationRequest",
    "GenerationState",
    "CreateTemplateInput",
    "GenerateDocumentInput",
    "TemplateDocument",
    "TemplateParameter",
]
