"""Request bodies accepted by the web server."""

from typing import Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field

from .schema import TemplateParameter


class CreateTemplateInput(BaseModel):
    """Body of ``POST /templates``; ``content_base64`` is the raw file."""

    model_config = ConfigDict(extra="ignore")

    name: str
    description: str = ""
    file_name: str
    content_base64: str
    parameters: List[TemplateParameter] = Field(default_factory=list)


class GenerateDocumentInput(BaseModel):
    """Body of ``POST /generate``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    template_id: str = Field(alias="templateId")
    parameters: Dict[str, Union[str, int, float, bool, None]]
