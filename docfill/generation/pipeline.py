"""Document assembly pipeline.

One ``generate`` call walks a single GenerationRequest through

    Requested -> ParametersValidated -> TemplateFetched -> Substituted
              -> Persisted -> Completed

or into Failed(reason) from any non-terminal state. Every collaborator call
is an await point; cancellation there lands the request in
Failed(CANCELLED) and removes anything already written under the result
key. Nothing is retried: callers resubmit, which creates a new request.
"""

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from docfill.config import GENERATED_BUCKET, TEMPLATES_BUCKET, Config
from docfill.exceptions import (
    ForbiddenError,
    GenerationFailedError,
    GenerationNotFoundError,
    StorageError,
    StorageWriteError,
    UnauthorizedError,
    UnsupportedTemplateError,
)
from docfill.logger import Logger
from docfill.metadata import MetadataStoreBase
from docfill.packaging import DocumentFiller, FillResult
from docfill.storage import ObjectStoreBase
from docfill.validation import ParameterValidator, render_value
from docfill.validation.models import (
    CONTENT_TYPES,
    STATE_ORDER,
    FailureReason,
    GenerationOutcome,
    GenerationRequest,
    GenerationState,
    TemplateDocument,
    TemplateParameter,
)


@dataclass(frozen=True)
class GenerationContext:
    """Per-call context; the principal comes from the identity provider."""

    principal_id: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def apply_defaults(
    parameters: List[TemplateParameter], values: Mapping[str, Any]
) -> Dict[str, str]:
    """Rendered value map with declared defaults filling blank parameters."""
    filled = {name: render_value(value) for name, value in values.items()}
    for parameter in parameters:
        if parameter.default is not None and not filled.get(parameter.name, "").strip():
            filled[parameter.name] = parameter.default
    return filled


class DocumentPipeline:
    """Produces filled documents from templates."""

    def __init__(
        self,
        object_store: ObjectStoreBase,
        metadata_store: MetadataStoreBase,
        logger: Logger,
        validator: Optional[ParameterValidator] = None,
        url_ttl_seconds: Optional[int] = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            object_store: Source of template bytes, sink for generated documents
            metadata_store: Template and generation records
            logger: Logger instance
            validator: Parameter validator (a default one if None)
            url_ttl_seconds: Lifetime of download URLs (configured default if None)
        """
        self.object_store = object_store
        self.metadata_store = metadata_store
        self.logger = logger
        self.validator = validator or ParameterValidator()
        self.url_ttl_seconds = url_ttl_seconds or Config.get_signed_url_ttl()

    async def generate(
        self, context: GenerationContext, template_id: str, values: Mapping[str, Any]
    ) -> GenerationOutcome:
        """
        Fill a template with values and return a download URL.

        Raises:
            UnauthorizedError: No principal on the context (nothing is recorded)
            GenerationFailedError: The request ended in Failed; ``reason`` says why
            asyncio.CancelledError: Re-raised after the request is marked cancelled
        """
        if not context.principal_id:
            raise UnauthorizedError()

        now = _now()
        request = GenerationRequest(
            generation_id=str(uuid.uuid4()),
            template_id=template_id,
            principal_id=context.principal_id,
            parameters={name: render_value(value) for name, value in values.items()},
            status=GenerationState.REQUESTED,
            history=[GenerationState.REQUESTED],
            created_at=now,
            updated_at=now,
        )
        written_key: Optional[str] = None

        try:
            await self.metadata_store.save_generation(request)
            self.logger.info(
                "Generation requested",
                generation_id=request.generation_id,
                template_id=template_id,
            )

            template = await self.metadata_store.get_template(template_id)
            if template is None:
                raise await self._fail(
                    request, FailureReason.TEMPLATE_NOT_FOUND, "Template not found"
                )

            resolved = apply_defaults(template.parameters, values)
            await self._validate(request, template, resolved)

            data = await self._fetch(request, template)
            filled = await self._substitute(request, template, data, resolved)

            result_key = f"{context.principal_id}/{request.generation_id}.{template.file_type}"
            written_key = result_key
            await self._persist(request, template, filled, result_key)
            download_url = await self._complete(request, result_key)
            written_key = None
        except asyncio.CancelledError:
            await self._cancel(request, written_key)
            raise
        except StorageError as e:
            # metadata store errors; object store errors are handled by each step
            if written_key is not None:
                await self._discard(written_key)
            if request.status.is_terminal:
                raise
            reason = (
                FailureReason.STORAGE_WRITE_ERROR
                if isinstance(e, StorageWriteError)
                else FailureReason.STORAGE_READ_ERROR
            )
            raise await self._fail(request, reason, "Failed to access generation records", e)

        return GenerationOutcome(
            generation_id=request.generation_id,
            result_key=result_key,
            download_url=download_url,
            leftover_placeholders=filled.leftover_placeholders,
        )

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    async def _validate(
        self, request: GenerationRequest, template: TemplateDocument, values: Mapping[str, str]
    ) -> None:
        result = self.validator.validate(template.parameters, values)
        issue = result.first_error
        if issue is not None:
            self.logger.info(
                "Parameter validation failed",
                generation_id=request.generation_id,
                parameter=issue.parameter,
                kind=issue.kind,
                issues=len(result.errors),
            )
            raise await self._fail(request, FailureReason(issue.kind), issue.message)
        await self._advance(request, GenerationState.PARAMETERS_VALIDATED)

    async def _fetch(self, request: GenerationRequest, template: TemplateDocument) -> bytes:
        try:
            data = await self.object_store.get_object(TEMPLATES_BUCKET, template.object_key)
        except StorageError as e:
            raise await self._fail(
                request, FailureReason.TEMPLATE_UNAVAILABLE, "Failed to download template file", e
            )
        await self._advance(request, GenerationState.TEMPLATE_FETCHED)
        return data

    async def _substitute(
        self,
        request: GenerationRequest,
        template: TemplateDocument,
        data: bytes,
        values: Mapping[str, str],
    ) -> FillResult:
        known = {name: values[name] for name in template.parameter_names() if name in values}
        filler = DocumentFiller(template.format, logger=self.logger)
        try:
            filled = filler.fill(data, known)
        except UnsupportedTemplateError as e:
            raise await self._fail(request, FailureReason.UNSUPPORTED_TEMPLATE, e.message, e)

        if filled.leftover_placeholders:
            self.logger.warning(
                "Placeholders left after substitution",
                generation_id=request.generation_id,
                leftover=filled.leftover_placeholders,
            )
        self.logger.debug(
            "Template substituted",
            generation_id=request.generation_id,
            container=filled.container.value,
            replacements=sum(filled.replacements.values()),
        )
        await self._advance(request, GenerationState.SUBSTITUTED)
        return filled

    async def _persist(
        self,
        request: GenerationRequest,
        template: TemplateDocument,
        filled: FillResult,
        result_key: str,
    ) -> None:
        write = asyncio.ensure_future(
            self.object_store.put_object(
                GENERATED_BUCKET,
                result_key,
                filled.data,
                content_type=CONTENT_TYPES[template.format],
                upsert=True,
            )
        )
        try:
            await asyncio.shield(write)
        except asyncio.CancelledError:
            # let the write settle so the cancel handler can remove it
            await asyncio.wait([write])
            if not write.cancelled() and write.exception() is not None:
                self.logger.error(
                    "Result write failed after cancellation",
                    generation_id=request.generation_id,
                    error=str(write.exception()),
                )
            raise
        except StorageError as e:
            raise await self._fail(
                request, FailureReason.STORAGE_WRITE_ERROR, "Failed to upload processed document", e
            )
        await self._advance(request, GenerationState.PERSISTED)

    async def _complete(self, request: GenerationRequest, result_key: str) -> str:
        try:
            url = await self.object_store.create_signed_url(
                GENERATED_BUCKET, result_key, self.url_ttl_seconds
            )
        except StorageError as e:
            await self._discard(result_key)
            raise await self._fail(
                request, FailureReason.STORAGE_READ_ERROR, "Failed to generate download URL", e
            )
        request.result_key = result_key
        await self._advance(request, GenerationState.COMPLETED)
        self.logger.info(
            "Document generated successfully",
            generation_id=request.generation_id,
            result_key=result_key,
        )
        return url

    # ------------------------------------------------------------------
    # State handling
    # ------------------------------------------------------------------

    async def _advance(self, request: GenerationRequest, state: GenerationState) -> None:
        current = STATE_ORDER.index(request.status)
        if STATE_ORDER.index(state) != current + 1:
            raise RuntimeError(f"Illegal transition {request.status.value} -> {state.value}")
        previous = (request.status, list(request.history), request.updated_at)
        request.status = state
        request.history.append(state)
        request.updated_at = _now()
        try:
            await self.metadata_store.save_generation(request)
        except StorageError:
            # the state only counts once it is recorded
            request.status, request.history, request.updated_at = previous
            raise
        self.logger.debug(
            "Generation state changed",
            generation_id=request.generation_id,
            template_id=request.template_id,
            state=state.value,
        )

    async def _fail(
        self,
        request: GenerationRequest,
        reason: FailureReason,
        message: str,
        cause: Optional[Exception] = None,
    ) -> GenerationFailedError:
        """Record the Failed state and return the error for the caller to raise."""
        if request.status.is_terminal:
            raise RuntimeError(f"Generation {request.generation_id} already finished")
        request.status = GenerationState.FAILED
        request.history.append(GenerationState.FAILED)
        request.failure_reason = reason
        request.failure_message = message
        request.result_key = None
        request.updated_at = _now()
        self.logger.error(
            "Generation failed",
            generation_id=request.generation_id,
            template_id=request.template_id,
            reason=reason.value,
            error=str(cause) if cause else message,
        )
        try:
            await self.metadata_store.save_generation(request)
        except StorageError as e:
            self.logger.error(
                "Failed to record generation failure",
                generation_id=request.generation_id,
                error=str(e),
            )
        return GenerationFailedError(
            reason=reason.value,
            message=message,
            generation_id=request.generation_id,
            cause=cause,
        )

    async def _discard(self, key: str) -> None:
        try:
            await self.object_store.delete_object(GENERATED_BUCKET, key)
        except StorageError as e:
            self.logger.error("Failed to remove partial result", key=key, error=str(e))

    async def _cancel(self, request: GenerationRequest, written_key: Optional[str]) -> None:
        if written_key is not None:
            await self._discard(written_key)
        if not request.status.is_terminal:
            await self._fail(request, FailureReason.CANCELLED, "Generation cancelled")
        self.logger.warning("Generation cancelled", generation_id=request.generation_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_generation(
        self, context: GenerationContext, generation_id: str
    ) -> GenerationRequest:
        if not context.principal_id:
            raise UnauthorizedError()
        request = await self.metadata_store.get_generation(generation_id)
        if request is None:
            raise GenerationNotFoundError(generation_id)
        if request.principal_id != context.principal_id:
            raise ForbiddenError("Generation belongs to another user", resource_id=generation_id)
        return request

    async def list_generations(self, context: GenerationContext) -> List[GenerationRequest]:
        if not context.principal_id:
            raise UnauthorizedError()
        return await self.metadata_store.list_generations(context.principal_id)
