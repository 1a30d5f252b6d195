"""docfill Web Server - REST API for template upload and document generation.

Exposes:
- Template management (upload, list, details, placeholder report, delete)
- Document generation (POST /generate) and generation history
- Signed download of generated documents (GET /files/...)

Authentication via ``Authorization: Bearer <token>``. With authentication
disabled the caller names itself with an ``X-Principal-Id`` header.
"""

import base64
import binascii
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, Dict, Optional

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as PydanticValidationError

from docfill.auth import AuthService, extract_bearer_token
from docfill.config import Config
from docfill.exceptions import DocfillError, GenerationFailedError, UnauthorizedError
from docfill.generation import DocumentPipeline, GenerationContext
from docfill.logger import Logger, session_logger
from docfill.metadata import JsonMetadataStore, MetadataStoreBase
from docfill.storage import FileObjectStore, UrlSigner
from docfill.storage.base import ObjectStoreBase
from docfill.templates import TemplateManager
from docfill.validation.models import (
    CreateTemplateInput,
    ErrorResponse,
    GenerateDocumentInput,
    GenerationRequest,
    TemplateDocument,
)

SERVICE_NAME = "docfill"
ANONYMOUS_PRINCIPAL = "anonymous"

_STATUS_BY_CODE = {
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "URL_EXPIRED": 403,
    "URL_INVALID": 403,
    "TEMPLATE_NOT_FOUND": 404,
    "GENERATION_NOT_FOUND": 404,
    "OBJECT_NOT_FOUND": 404,
    "TEMPLATE_TOO_LARGE": 413,
}


def _template_summary(template: TemplateDocument) -> Dict[str, Any]:
    return {
        "id": template.template_id,
        "name": template.name,
        "description": template.description,
        "file_type": template.file_type,
        "format": template.format.value,
        "created_by": template.created_by,
        "created_at": template.created_at,
    }


def _template_details(template: TemplateDocument) -> Dict[str, Any]:
    data = _template_summary(template)
    data["parameters"] = [p.model_dump(mode="json") for p in template.parameters]
    return data


def _generation_summary(request: GenerationRequest) -> Dict[str, Any]:
    return {
        "id": request.generation_id,
        "template_id": request.template_id,
        "status": request.status.value,
        "failure_reason": request.failure_reason.value if request.failure_reason else None,
        "failure_message": request.failure_message,
        "file_url": request.result_key,
        "parameters": request.parameters,
        "created_at": request.created_at,
    }


class DocfillWebServer:
    """FastAPI web server for templates and document generation."""

    def __init__(
        self,
        object_store: Optional[ObjectStoreBase] = None,
        metadata_store: Optional[MetadataStoreBase] = None,
        require_auth: bool = True,
        auth_service: Optional[AuthService] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the docfill web server.

        Args:
            object_store: Object store collaborator (file store under the data dir if None)
            metadata_store: Metadata store collaborator (JSON store under the data dir if None)
            require_auth: Whether to require a bearer token
            auth_service: AuthService for token verification (required if require_auth=True)
            logger: Logger instance

        Endpoints exposed:
            GET /ping - Health check
            POST /templates - Upload a template with its parameters
            GET /templates - List templates
            GET /templates/{id} - Template details with parameters
            GET /templates/{id}/placeholders - Placeholders vs parameters report
            DELETE /templates/{id} - Delete own template
            POST /generate - Generate a filled document
            GET /generations - Caller's generation history
            GET /generations/{id} - One generation record
            GET /files/{bucket}/{key} - Signed download
        """
        if require_auth and auth_service is None:
            raise ValueError("auth_service is required when require_auth=True")

        self.app = FastAPI(title=SERVICE_NAME, description="Office template filling REST API")
        self.logger: Logger = logger or session_logger
        self.require_auth = require_auth
        self.auth_service = auth_service

        self.object_store = object_store or FileObjectStore(
            signer=UrlSigner(Config.get_web_server_url(), Config.get_jwt_secret()),
            logger=self.logger,
        )
        self.metadata_store = metadata_store or JsonMetadataStore(logger=self.logger)
        self.template_manager = TemplateManager(
            object_store=self.object_store,
            metadata_store=self.metadata_store,
            logger=self.logger,
        )
        self.pipeline = DocumentPipeline(
            object_store=self.object_store,
            metadata_store=self.metadata_store,
            logger=self.logger,
        )

        self.logger.info(
            "docfill web server initialized",
            authentication_required=require_auth,
        )
        self._setup_routes()

    def _resolve_principal(
        self, authorization: Optional[str], x_principal_id: Optional[str]
    ) -> str:
        """
        Identify the caller.

        Raises:
            UnauthorizedError: If auth is required and no valid bearer token was sent
        """
        if not self.require_auth:
            return (x_principal_id or "").strip() or ANONYMOUS_PRINCIPAL

        token = extract_bearer_token(authorization)
        if not token:
            raise UnauthorizedError("No authorization header")
        if self.auth_service is None:
            raise UnauthorizedError("Authentication is not configured")
        return self.auth_service.verify_token(token).principal_id

    def _error_response(
        self, exc: DocfillError, status_code: Optional[int] = None, with_code: bool = True
    ) -> JSONResponse:
        status = status_code or _STATUS_BY_CODE.get(exc.code, 400)
        if exc.code == "UNAUTHORIZED":
            status = 401
        body = ErrorResponse(error=exc.message, code=exc.code if with_code else None)
        return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))

    def _setup_routes(self):
        """Set up all API routes."""

        @self.app.get("/ping")
        async def ping():
            """
            Health check endpoint.

            Returns:
                {status: "ok", timestamp: ISO8601, service: "docfill"}
            """
            current_time = datetime.now().isoformat()
            self.logger.debug("GET /ping", timestamp=current_time)
            return JSONResponse(
                content={"status": "ok", "timestamp": current_time, "service": SERVICE_NAME}
            )

        # ====================================================================
        # TEMPLATES
        # ====================================================================

        @self.app.post("/templates")
        async def create_template(
            request: Request,
            authorization: Optional[str] = Header(None),
            x_principal_id: Optional[str] = Header(None),
        ):
            """Upload a template. Body: CreateTemplateInput."""
            try:
                principal_id = self._resolve_principal(authorization, x_principal_id)
                try:
                    body = CreateTemplateInput.model_validate(await request.json())
                except (PydanticValidationError, ValueError) as e:
                    self.logger.info("POST /templates rejected", error=str(e))
                    return JSONResponse(status_code=400, content={"error": "Invalid template payload"})
                try:
                    content = base64.b64decode(body.content_base64, validate=True)
                except (binascii.Error, ValueError):
                    return JSONResponse(
                        status_code=400, content={"error": "content_base64 is not valid base64"}
                    )

                template = await self.template_manager.create_template(
                    principal_id=principal_id,
                    name=body.name,
                    description=body.description,
                    file_name=body.file_name,
                    content=content,
                    parameters=body.parameters,
                )
                self.logger.info("/templates created", template_id=template.template_id, status=201)
                return JSONResponse(
                    status_code=201,
                    content={"status": "success", "data": _template_details(template)},
                )
            except DocfillError as e:
                self.logger.warning("/templates failed", code=e.code, error=e.message)
                return self._error_response(e)

        @self.app.get("/templates")
        async def list_templates(
            authorization: Optional[str] = Header(None),
            x_principal_id: Optional[str] = Header(None),
        ):
            """List available templates."""
            try:
                self._resolve_principal(authorization, x_principal_id)
                templates = await self.template_manager.list_templates()
                self.logger.info("/templates completed", count=len(templates), status=200)
                return JSONResponse(
                    content={"status": "success", "data": [_template_summary(t) for t in templates]}
                )
            except DocfillError as e:
                return self._error_response(e)

        @self.app.get("/templates/{template_id}")
        async def get_template_details(
            template_id: str,
            authorization: Optional[str] = Header(None),
            x_principal_id: Optional[str] = Header(None),
        ):
            """Template details including its parameters in declaration order."""
            try:
                self._resolve_principal(authorization, x_principal_id)
                template = await self.template_manager.get_template(template_id)
                return JSONResponse(content={"status": "success", "data": _template_details(template)})
            except DocfillError as e:
                self.logger.warning("Template lookup failed", template_id=template_id, code=e.code)
                return self._error_response(e)

        @self.app.get("/templates/{template_id}/placeholders")
        async def inspect_template(
            template_id: str,
            authorization: Optional[str] = Header(None),
            x_principal_id: Optional[str] = Header(None),
        ):
            try:
                self._resolve_principal(authorization, x_principal_id)
                report = await self.template_manager.inspect_template(template_id)
                return JSONResponse(content={"status": "success", "data": report})
            except DocfillError as e:
                return self._error_response(e)

        @self.app.delete("/templates/{template_id}")
        async def delete_template(
            template_id: str,
            authorization: Optional[str] = Header(None),
            x_principal_id: Optional[str] = Header(None),
        ):
            try:
                principal_id = self._resolve_principal(authorization, x_principal_id)
                await self.template_manager.delete_template(principal_id, template_id)
                return JSONResponse(content={"status": "success", "data": {"id": template_id}})
            except DocfillError as e:
                self.logger.warning("Template delete failed", template_id=template_id, code=e.code)
                return self._error_response(e)

        # ====================================================================
        # GENERATION
        # ====================================================================

        @self.app.post("/generate")
        async def generate_document(
            request: Request,
            authorization: Optional[str] = Header(None),
            x_principal_id: Optional[str] = Header(None),
        ):
            """
            Generate a filled document.

            Body: {templateId, parameters}. Every failure maps to one 400
            response carrying a human-readable message; auth failures are 401.
            """
            try:
                principal_id = self._resolve_principal(authorization, x_principal_id)
            except DocfillError as e:
                return self._error_response(e, with_code=False)

            try:
                body = GenerateDocumentInput.model_validate(await request.json())
            except (PydanticValidationError, ValueError):
                return JSONResponse(status_code=400, content={"error": "Missing required parameters"})

            self.logger.info("POST /generate", template_id=body.template_id)
            try:
                outcome = await self.pipeline.generate(
                    GenerationContext(principal_id=principal_id), body.template_id, body.parameters
                )
            except GenerationFailedError as e:
                return self._error_response(e, status_code=400, with_code=False)
            except DocfillError as e:
                return self._error_response(e, with_code=False)

            return JSONResponse(
                content={
                    "success": True,
                    "message": "Document generated successfully",
                    "documentId": outcome.generation_id,
                    "downloadUrl": outcome.download_url,
                }
            )

        @self.app.get("/generations")
        async def list_generations(
            authorization: Optional[str] = Header(None),
            x_principal_id: Optional[str] = Header(None),
        ):
            try:
                principal_id = self._resolve_principal(authorization, x_principal_id)
                records = await self.pipeline.list_generations(GenerationContext(principal_id))
                return JSONResponse(
                    content={"status": "success", "data": [_generation_summary(r) for r in records]}
                )
            except DocfillError as e:
                return self._error_response(e)

        @self.app.get("/generations/{generation_id}")
        async def get_generation(
            generation_id: str,
            authorization: Optional[str] = Header(None),
            x_principal_id: Optional[str] = Header(None),
        ):
            try:
                principal_id = self._resolve_principal(authorization, x_principal_id)
                record = await self.pipeline.get_generation(
                    GenerationContext(principal_id), generation_id
                )
                return JSONResponse(content={"status": "success", "data": _generation_summary(record)})
            except DocfillError as e:
                return self._error_response(e)

        # ====================================================================
        # SIGNED DOWNLOADS (token in the URL, no auth header)
        # ====================================================================

        @self.app.get("/files/{bucket}/{key:path}")
        async def download(bucket: str, key: str, token: str = ""):
            try:
                data, content_type = await self.object_store.open_signed(bucket, key, token)
            except DocfillError as e:
                self.logger.warning("Signed download refused", bucket=bucket, key=key, code=e.code)
                return self._error_response(e)
            filename = PurePosixPath(key).name
            return Response(
                content=data,
                media_type=content_type,
                headers={"Content-Disposition": f'attachment; filename="{filename}"'},
            )
