"""Object store exceptions."""

from typing import Optional

from docfill.exceptions.base import StorageError


class ObjectNotFoundError(StorageError):
    """No object stored under the key."""

    def __init__(self, bucket: str, key: str):
        super().__init__(
            code="OBJECT_NOT_FOUND",
            message=f"Object '{key}' not found in bucket '{bucket}'",
            details={"bucket": bucket, "key": key},
        )
        self.bucket = bucket
        self.key = key


class StorageReadError(StorageError):
    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(code="STORAGE_READ_ERROR", message=message, details={"key": key})


class StorageWriteError(StorageError):
    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(code="STORAGE_WRITE_ERROR", message=message, details={"key": key})


class InvalidObjectKeyError(StorageError):
    """Key is empty or escapes the bucket root."""

    def __init__(self, key: str):
        super().__init__(
            code="INVALID_OBJECT_KEY",
            message=f"Invalid object key '{key}'",
            details={"key": key},
        )
