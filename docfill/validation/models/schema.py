"""Template and parameter schema models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import DocumentFormat, ParameterType


class TemplateParameter(BaseModel):
    """A typed parameter bound to ``{{name}}`` placeholders in a template."""

    model_config = ConfigDict(extra="ignore", use_enum_values=False)

    name: str
    label: str
    type: ParameterType = ParameterType.TEXT
    required: bool = True
    default: Optional[str] = None


class TemplateDocument(BaseModel):
    """Stored template record.

    ``object_key`` points into the templates bucket of the object store; the
    bytes behind it are never modified after upload.
    """

    model_config = ConfigDict(extra="ignore")

    template_id: str
    name: str
    description: str = ""
    file_type: str
    format: DocumentFormat
    object_key: str
    created_by: str
    size: int = 0
    created_at: str
    updated_at: str
    parameters: List[TemplateParameter] = Field(default_factory=list)

    def parameter_names(self) -> List[str]:
        return [p.name for p in self.parameters]
