"""Generation request models and pipeline states."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerationState(str, Enum):
    """Pipeline states; COMPLETED and FAILED are terminal."""

    REQUESTED = "requested"
    PARAMETERS_VALIDATED = "parameters_validated"
    TEMPLATE_FETCHED = "template_fetched"
    SUBSTITUTED = "substituted"
    PERSISTED = "persisted"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (GenerationState.COMPLETED, GenerationState.FAILED)


# Forward-only ordering of the non-failure states.
STATE_ORDER = [
    GenerationState.REQUESTED,
    GenerationState.PARAMETERS_VALIDATED,
    GenerationState.TEMPLATE_FETCHED,
    GenerationState.SUBSTITUTED,
    GenerationState.PERSISTED,
    GenerationState.COMPLETED,
]


class FailureReason(str, Enum):
    MISSING_REQUIRED = "MISSING_REQUIRED"
    INVALID_FORMAT = "INVALID_FORMAT"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
    TEMPLATE_UNAVAILABLE = "TEMPLATE_UNAVAILABLE"
    UNSUPPORTED_TEMPLATE = "UNSUPPORTED_TEMPLATE"
    STORAGE_READ_ERROR = "STORAGE_READ_ERROR"
    STORAGE_WRITE_ERROR = "STORAGE_WRITE_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    CANCELLED = "CANCELLED"


class GenerationRequest(BaseModel):
    """One generation invocation, persisted for audit."""

    model_config = ConfigDict(extra="ignore")

    generation_id: str
    template_id: str
    principal_id: str
    parameters: Dict[str, str] = Field(default_factory=dict)
    status: GenerationState = GenerationState.REQUESTED
    failure_reason: Optional[FailureReason] = None
    failure_message: Optional[str] = None
    result_key: Optional[str] = None
    history: List[GenerationState] = Field(default_factory=list)
    created_at: str
    updated_at: str


class GenerationOutcome(BaseModel):
    """What a completed pipeline hands back to its caller."""

    generation_id: str
    result_key: str
    download_url: str
    leftover_placeholders: int = 0
