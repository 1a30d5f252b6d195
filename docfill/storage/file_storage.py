"""File-based object store.

Objects are stored as files at ``{storage_dir}/{bucket}/{key}``; a
``metadata.json`` beside the buckets records content type, size and
creation time per object.
"""

import asyncio
import json
import threading
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Tuple

from docfill.config import get_default_storage_dir
from docfill.exceptions import (
    InvalidObjectKeyError,
    ObjectNotFoundError,
    StorageReadError,
    StorageWriteError,
)
from docfill.logger import Logger, session_logger
from docfill.storage.base import ObjectStoreBase
from docfill.storage.signing import UrlSigner

METADATA_FILE = "metadata.json"


class FileObjectStore(ObjectStoreBase):
    """Object store backed by a local directory"""

    def __init__(
        self,
        signer: UrlSigner,
        storage_dir: Optional[str] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize file storage

        Args:
            signer: Signs and verifies retrieval URLs
            storage_dir: Root directory. If None, uses configured default from docfill.config
            logger: Logger instance
        """
        self.storage_dir = Path(storage_dir or get_default_storage_dir())
        self.metadata_file = self.storage_dir / METADATA_FILE
        self.signer = signer
        self.logger: Logger = logger or session_logger
        self._lock = threading.Lock()

        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error("Failed to create storage directory", error=str(e))
            raise StorageWriteError(f"Failed to create storage directory: {e}")
        self.metadata: Dict[str, Dict] = self._load_metadata()
        self.logger.info("File object store initialized", directory=str(self.storage_dir))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load_metadata(self) -> Dict[str, Dict]:
        if not self.metadata_file.exists():
            return {}
        try:
            with open(self.metadata_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error("Failed to load metadata", error=str(e))
            return {}
        if not isinstance(data, dict):
            self.logger.warning(
                "Metadata has unexpected structure, resetting to empty dict",
                type=type(data).__name__,
            )
            return {}
        return data

    def _save_metadata(self) -> None:
        tmp = self.metadata_file.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self.metadata, f, indent=2)
        tmp.replace(self.metadata_file)

    @staticmethod
    def _entry_id(bucket: str, key: str) -> str:
        return f"{bucket}/{key}"

    def _object_path(self, bucket: str, key: str) -> Path:
        """Map bucket/key to a path, refusing anything outside the bucket."""
        for part in (bucket, key):
            if not part or "\\" in part or part.startswith("/"):
                raise InvalidObjectKeyError(f"{bucket}/{key}")
        parts = PurePosixPath(key).parts
        if any(p in ("..", ".") for p in parts) or "/" in bucket or bucket in (".", ".."):
            raise InvalidObjectKeyError(f"{bucket}/{key}")
        return self.storage_dir.joinpath(bucket, *parts)

    def _write(self, bucket: str, key: str, data: bytes, content_type: str, upsert: bool) -> None:
        path = self._object_path(bucket, key)
        with self._lock:
            if path.exists() and not upsert:
                raise StorageWriteError("The resource already exists", key=key)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, "wb") as f:
                    f.write(data)
                self.metadata[self._entry_id(bucket, key)] = {
                    "content_type": content_type,
                    "size": len(data),
                    "created_at": datetime.now(timezone.utc).isoformat(),
                }
                self._save_metadata()
            except OSError as e:
                self.logger.error("Failed to write object", bucket=bucket, key=key, error=str(e))
                raise StorageWriteError(f"Failed to store object: {e}", key=key)

    def _read(self, bucket: str, key: str) -> bytes:
        path = self._object_path(bucket, key)
        if not path.is_file():
            raise ObjectNotFoundError(bucket, key)
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            self.logger.error("Failed to read object", bucket=bucket, key=key, error=str(e))
            raise StorageReadError(f"Failed to read object: {e}", key=key)

    def _delete(self, bucket: str, key: str) -> bool:
        path = self._object_path(bucket, key)
        with self._lock:
            deleted = False
            if path.is_file():
                path.unlink()
                deleted = True
            if self.metadata.pop(self._entry_id(bucket, key), None) is not None:
                self._save_metadata()
        return deleted

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def put_object(
        self, bucket: str, key: str, data: bytes, content_type: str, upsert: bool = True
    ) -> str:
        self.logger.debug("Storing object", bucket=bucket, key=key, size=len(data))
        await asyncio.to_thread(self._write, bucket, key, data, content_type, upsert)
        self.logger.info("Object stored", bucket=bucket, key=key, size=len(data))
        return key

    async def get_object(self, bucket: str, key: str) -> bytes:
        data = await asyncio.to_thread(self._read, bucket, key)
        self.logger.debug("Object retrieved", bucket=bucket, key=key, size=len(data))
        return data

    async def delete_object(self, bucket: str, key: str) -> bool:
        deleted = await asyncio.to_thread(self._delete, bucket, key)
        if deleted:
            self.logger.info("Object deleted", bucket=bucket, key=key)
        return deleted

    async def exists(self, bucket: str, key: str) -> bool:
        return self._object_path(bucket, key).is_file()

    async def list_objects(self, bucket: str, prefix: str = "") -> List[str]:
        if not bucket or "/" in bucket or "\\" in bucket or bucket in (".", ".."):
            raise InvalidObjectKeyError(bucket)
        bucket_dir = self.storage_dir / bucket
        if not bucket_dir.exists():
            return []
        keys = [
            path.relative_to(bucket_dir).as_posix()
            for path in bucket_dir.rglob("*")
            if path.is_file()
        ]
        return sorted(k for k in keys if k.startswith(prefix))

    def get_content_type(self, bucket: str, key: str) -> str:
        entry = self.metadata.get(self._entry_id(bucket, key), {})
        return entry.get("content_type", "application/octet-stream")

    async def create_signed_url(self, bucket: str, key: str, expires_in: int) -> str:
        if not await self.exists(bucket, key):
            raise ObjectNotFoundError(bucket, key)
        url = self.signer.url_for(bucket, key, expires_in)
        self.logger.debug("Signed URL created", bucket=bucket, key=key, expires_in=expires_in)
        return url

    async def open_signed(self, bucket: str, key: str, token: str) -> Tuple[bytes, str]:
        self.signer.verify(bucket, key, token)
        data = await self.get_object(bucket, key)
        return data, self.get_content_type(bucket, key)
