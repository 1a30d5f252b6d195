"""Template management: upload, discovery and removal of templates."""

import time
import uuid
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Sequence

from docfill.config import TEMPLATES_BUCKET, Config
from docfill.exceptions import (
    ForbiddenError,
    TemplateNotFoundError,
    TemplateUnavailableError,
    UnauthorizedError,
    UnsupportedTemplateError,
    ValidationError,
)
from docfill.exceptions.storage import ObjectNotFoundError
from docfill.logger import Logger
from docfill.metadata import MetadataStoreBase
from docfill.packaging import placeholder_names
from docfill.storage import ObjectStoreBase
from docfill.validation import check_parameter_definitions
from docfill.validation.models import (
    CONTENT_TYPES,
    FILE_TYPE_FORMATS,
    TemplateDocument,
    TemplateParameter,
)

MAX_TEMPLATE_NAME_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000


def _normalize(parameter: TemplateParameter) -> TemplateParameter:
    default = parameter.default.strip() if parameter.default is not None else None
    return parameter.model_copy(
        update={
            "name": parameter.name.strip(),
            "label": parameter.label.strip(),
            "default": default or None,
        }
    )


class TemplateManager:
    """Creates template records and stores their bytes."""

    def __init__(
        self,
        object_store: ObjectStoreBase,
        metadata_store: MetadataStoreBase,
        logger: Logger,
        max_template_bytes: Optional[int] = None,
    ) -> None:
        """
        Initialize the template manager.

        Args:
            object_store: Holds template bytes
            metadata_store: Holds template records
            logger: Logger instance
            max_template_bytes: Upload size limit (uses configured default if None)
        """
        self.object_store = object_store
        self.metadata_store = metadata_store
        self.logger = logger
        self.max_template_bytes = max_template_bytes or Config.get_max_template_bytes()

    async def create_template(
        self,
        principal_id: str,
        name: str,
        file_name: str,
        content: bytes,
        parameters: Sequence[TemplateParameter],
        description: str = "",
    ) -> TemplateDocument:
        """
        Upload a template and record its parameter schema.

        The bytes are stored at ``{principal_id}/{timestamp_ms}.{ext}``.

        Raises:
            UnauthorizedError: No principal
            ValidationError: Name, description, size or parameter list invalid
            UnsupportedTemplateError: File extension is not a Word/Excel type
            DuplicateParameterNameError: Two parameters share a name
            StorageWriteError: Upload failed
        """
        if not principal_id:
            raise UnauthorizedError()

        name = name.strip()
        description = (description or "").strip()
        if not name:
            raise ValidationError(code="INVALID_TEMPLATE", message="Template name is required")
        if len(name) > MAX_TEMPLATE_NAME_LENGTH:
            raise ValidationError(
                code="INVALID_TEMPLATE",
                message=f"Template name exceeds {MAX_TEMPLATE_NAME_LENGTH} characters",
            )
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                code="INVALID_TEMPLATE",
                message=f"Description exceeds {MAX_DESCRIPTION_LENGTH} characters",
            )

        file_type = PurePosixPath(file_name).suffix.lstrip(".").lower()
        document_format = FILE_TYPE_FORMATS.get(file_type)
        if document_format is None:
            raise UnsupportedTemplateError(
                "File must be Word (.docx, .doc) or Excel (.xlsx, .xls)", file_type=file_type
            )
        if not content:
            raise ValidationError(code="INVALID_TEMPLATE", message="Template file is empty")
        if len(content) > self.max_template_bytes:
            raise ValidationError(
                code="TEMPLATE_TOO_LARGE",
                message=f"File size must be less than {self.max_template_bytes // (1024 * 1024)}MB",
            )

        if not parameters:
            raise ValidationError(
                code="INVALID_TEMPLATE", message="Please add at least one parameter"
            )
        normalized = [_normalize(p) for p in parameters]
        check_parameter_definitions(normalized)

        object_key = f"{principal_id}/{int(time.time() * 1000)}.{file_type}"
        await self.object_store.put_object(
            TEMPLATES_BUCKET,
            object_key,
            content,
            content_type=CONTENT_TYPES[document_format],
            upsert=False,
        )

        now = datetime.now(timezone.utc).isoformat()
        template = TemplateDocument(
            template_id=str(uuid.uuid4()),
            name=name,
            description=description,
            file_type=file_type,
            format=document_format,
            object_key=object_key,
            created_by=principal_id,
            size=len(content),
            created_at=now,
            updated_at=now,
            parameters=normalized,
        )
        try:
            await self.metadata_store.save_template(template)
        except Exception:
            # No record points at the upload, so remove it
            await self.object_store.delete_object(TEMPLATES_BUCKET, object_key)
            raise

        self.logger.info(
            "Template created",
            template_id=template.template_id,
            format=document_format.value,
            parameters=len(normalized),
            size=len(content),
        )
        return template

    async def get_template(self, template_id: str) -> TemplateDocument:
        """
        Raises:
            TemplateNotFoundError: If no record exists
        """
        template = await self.metadata_store.get_template(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    async def list_templates(self) -> List[TemplateDocument]:
        templates = await self.metadata_store.list_templates()
        self.logger.debug("Listed templates", count=len(templates))
        return templates

    async def delete_template(self, principal_id: str, template_id: str) -> None:
        """
        Delete a template owned by the principal, bytes included.

        Raises:
            TemplateNotFoundError: If no record exists
            ForbiddenError: If the principal did not create it
        """
        template = await self.get_template(template_id)
        if template.created_by != principal_id:
            raise ForbiddenError("Only the template owner can delete it", resource_id=template_id)

        await self.object_store.delete_object(TEMPLATES_BUCKET, template.object_key)
        await self.metadata_store.delete_template(template_id)
        self.logger.info("Template deleted", template_id=template_id)

    async def inspect_template(self, template_id: str) -> Dict[str, List[str]]:
        """
        Compare the placeholders in a template body with its parameters.

        Returns:
            Mapping with ``placeholders`` (names found in the body),
            ``unbound`` (placeholders with no parameter) and ``unused``
            (parameters with no placeholder)
        """
        template = await self.get_template(template_id)
        try:
            data = await self.object_store.get_object(TEMPLATES_BUCKET, template.object_key)
        except ObjectNotFoundError as e:
            raise TemplateUnavailableError(template_id, reason=e.message)

        found = placeholder_names(data)
        declared = template.parameter_names()
        return {
            "placeholders": found,
            "unbound": [n for n in found if n not in declared],
            "unused": [n for n in declared if n not in found],
        }
