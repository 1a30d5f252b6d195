"""JSON-file persistence for template and generation records.

Layout::

    {base_dir}/templates/{template_id}.json
    {base_dir}/generations/{generation_id}.json
"""

from __future__ import annotations

import asyncio
import json
import threading
from pathlib import Path
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel

from docfill.config import get_default_metadata_dir
from docfill.exceptions import DuplicateParameterNameError, StorageReadError, StorageWriteError
from docfill.logger import Logger
from docfill.metadata.base import MetadataStoreBase
from docfill.validation.models import GenerationRequest, TemplateDocument

RecordT = TypeVar("RecordT", bound=BaseModel)


class JsonMetadataStore(MetadataStoreBase):
    """File-based metadata store, one JSON document per record."""

    def __init__(self, base_dir: Optional[str] = None, logger: Optional[Logger] = None) -> None:
        self.base_dir = Path(base_dir or get_default_metadata_dir())
        self.templates_dir = self.base_dir / "templates"
        self.generations_dir = self.base_dir / "generations"
        self.templates_dir.mkdir(parents=True, exist_ok=True)
        self.generations_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logger
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    async def save_template(self, template: TemplateDocument) -> None:
        seen = set()
        for parameter in template.parameters:
            if parameter.name in seen:
                raise DuplicateParameterNameError(parameter.name, template.template_id)
            seen.add(parameter.name)
        path = self._record_path(self.templates_dir, template.template_id)
        await asyncio.to_thread(self._write, path, template)
        if self.logger:
            self.logger.debug("Template record persisted", template_id=template.template_id)

    async def get_template(self, template_id: str) -> Optional[TemplateDocument]:
        return await asyncio.to_thread(
            self._read, self._record_path(self.templates_dir, template_id), TemplateDocument
        )

    async def list_templates(self) -> List[TemplateDocument]:
        records = await asyncio.to_thread(self._read_all, self.templates_dir, TemplateDocument)
        return sorted(records, key=lambda t: t.created_at, reverse=True)

    async def delete_template(self, template_id: str) -> bool:
        path = self._record_path(self.templates_dir, template_id)
        deleted = await asyncio.to_thread(self._delete, path)
        if deleted and self.logger:
            self.logger.info("Template record deleted", template_id=template_id)
        return deleted

    # ------------------------------------------------------------------
    # Generations
    # ------------------------------------------------------------------

    async def save_generation(self, request: GenerationRequest) -> None:
        path = self._record_path(self.generations_dir, request.generation_id)
        await asyncio.to_thread(self._write, path, request)
        if self.logger:
            self.logger.debug(
                "Generation record persisted",
                generation_id=request.generation_id,
                status=request.status.value,
            )

    async def get_generation(self, generation_id: str) -> Optional[GenerationRequest]:
        return await asyncio.to_thread(
            self._read, self._record_path(self.generations_dir, generation_id), GenerationRequest
        )

    async def list_generations(self, principal_id: Optional[str] = None) -> List[GenerationRequest]:
        records = await asyncio.to_thread(self._read_all, self.generations_dir, GenerationRequest)
        if principal_id is not None:
            records = [r for r in records if r.principal_id == principal_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _record_path(directory: Path, record_id: str) -> Path:
        if not record_id or "/" in record_id or "\\" in record_id or record_id.startswith("."):
            raise StorageReadError(f"Invalid record id '{record_id}'", key=record_id)
        return directory / f"{record_id}.json"

    def _write(self, path: Path, record: BaseModel) -> None:
        tmp = path.with_suffix(".tmp")
        try:
            with self._lock:
                with tmp.open("w", encoding="utf-8") as handle:
                    handle.write(record.model_dump_json(indent=2))
                tmp.replace(path)
        except OSError as exc:
            if self.logger:
                self.logger.error("Failed to persist record", path=str(path), error=str(exc))
            raise StorageWriteError(f"Failed to persist record: {exc}", key=path.stem)

    def _read(self, path: Path, model: Type[RecordT]) -> Optional[RecordT]:
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                return model.model_validate(json.load(handle))
        except (OSError, ValueError) as exc:
            if self.logger:
                self.logger.error("Failed to load record", path=str(path), error=str(exc))
            raise StorageReadError(f"Failed to load record: {exc}", key=path.stem)

    def _read_all(self, directory: Path, model: Type[RecordT]) -> List[RecordT]:
        records = []
        for path in directory.glob("*.json"):
            record = self._read(path, model)
            if record is not None:
                records.append(record)
        return records

    def _delete(self, path: Path) -> bool:
        if not path.exists():
            return False
        path.unlink(missing_ok=True)
        return True


__all__ = ["JsonMetadataStore"]
