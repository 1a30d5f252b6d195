"""Base interface for the metadata store collaborator."""

from abc import ABC, abstractmethod
from typing import List, Optional

from docfill.validation.models import GenerationRequest, TemplateDocument


class MetadataStoreBase(ABC):
    """Record storage for templates and generation requests.

    Implementations enforce that parameter names are unique per template.
    """

    @abstractmethod
    async def save_template(self, template: TemplateDocument) -> None:
        """
        Insert or replace a template record

        Raises:
            DuplicateParameterNameError: If two parameters share a name
        """
        pass

    @abstractmethod
    async def get_template(self, template_id: str) -> Optional[TemplateDocument]:
        pass

    @abstractmethod
    async def list_templates(self) -> List[TemplateDocument]:
        pass

    @abstractmethod
    async def delete_template(self, template_id: str) -> bool:
        pass

    @abstractmethod
    async def save_generation(self, request: GenerationRequest) -> None:
        pass

    @abstractmethod
    async def get_generation(self, generation_id: str) -> Optional[GenerationRequest]:
        pass

    @abstractmethod
    async def list_generations(self, principal_id: Optional[str] = None) -> List[GenerationRequest]:
        pass
